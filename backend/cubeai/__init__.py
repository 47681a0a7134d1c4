"""Backend package for the CubeAI project workspace.

This package exposes the service, repository and model modules used by
the FastAPI application. Projects belong to a member, optionally follow
a curriculum, and accumulate history snapshots of their structure.
"""
