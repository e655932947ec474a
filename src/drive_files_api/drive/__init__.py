"""
Google Drive adapter: the "Remote File Store".

Functions mirror CRUD verbs: folder creation, writes, reads and deletes, all delegated to
the Drive v3 API through a service-account client.
"""
