# Client package init
"""
Client-side access to the journal backend.

    - credentials.py: TokenStorage + CredentialResolver (bearer token lookup)
    - http.py:        ApiClient (JSON wrapper, authenticated variants)
    - journal.py:     JournalClient (typed entry operations)
    - config.py:      ClientSettings (JOURNAL_* environment variables)
"""
