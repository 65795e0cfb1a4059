from .apollo_tools import apollo_people_match

# cleaning_tools is imported on demand; it pulls in litellm
__all__ = ["apollo_people_match"]
