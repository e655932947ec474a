"""
Configuration management for the Drive Files API.

Contains the Pydantic settings shared by the API server and the command line client.
"""
