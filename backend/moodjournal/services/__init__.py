# Services package init
"""
Business logic between routes (HTTP) and the database.

Service Inventory:
    - EntryService: owner-scoped CRUD, validation and partial merge
    - checklist: codec for checklist content, shared with the client
"""
