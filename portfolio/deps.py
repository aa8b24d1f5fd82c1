# portfolio/deps.py
from fastapi import Request

from portfolio.services.blob_store import BlobStore

# Blob stores are built once in main.py and parked on app.state

def get_resume_store(request: Request) -> BlobStore:
    return request.app.state.resume_store

def get_certificate_store(request: Request) -> BlobStore:
    return request.app.state.certificate_store
