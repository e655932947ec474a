"""Drive Files API: a file manager backed by Google Drive and Azure Blob Storage."""
