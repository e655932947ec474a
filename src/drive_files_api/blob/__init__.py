"""
Azure Blob Storage adapter used for single-file and zipped multi-file downloads.
"""
