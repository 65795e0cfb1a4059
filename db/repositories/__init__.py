"""Repository layer for the contact identity engine.

Plain async query functions over an AsyncSession; callers own the transaction.
- contacts: get_by_id, find_by_linkedin_variants, find_by_name, insert,
            update_fields, get_contact_view
- contact_emails: get, count_for_contact, insert, mark_verified, list_for_contact
"""
