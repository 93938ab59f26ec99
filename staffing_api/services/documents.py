from __future__ import annotations

import logging
import os
import shutil

from flask import current_app

from staffing_api.common.errors import DocumentStorageError
from staffing_api.models.document import INVITE_SLUG, InvitedEmployeeDocument, TempUploadDocument
from staffing_api.services import repository

log = logging.getLogger(__name__)


def _root() -> str:
    return current_app.config["DOCUMENTS_ROOT"]


def bank_documents_folder(reference_id: str) -> str:
    return f"Employee/{reference_id}/BankDocuments"


def document_url(rel_path: str) -> str:
    base = current_app.config.get("DOCUMENT_URL", "")
    return f"{base}{rel_path}".replace(" ", "%20")


def pending_document(new_document_id: str, slug: str = ""):
    model = InvitedEmployeeDocument if slug == INVITE_SLUG else TempUploadDocument
    found = repository.find(model, {"id": new_document_id}, limit=1)
    return found.data[0] if found.status else None


def stage_pending_document(new_document_id: str, slug: str, dest_folder: str) -> dict:
    """Copy a pending upload into ``dest_folder`` and describe where it landed.

    The upload itself stays in place until the caller commits and calls
    ``remove_stored_document`` on the returned ``source``.
    """
    doc = pending_document(new_document_id, slug)
    if doc is None:
        raise DocumentStorageError("Uploaded document not found", payload=new_document_id)

    src = os.path.join(_root(), doc.document_path)
    rel_dest = f"{dest_folder}/{doc.document_name}"
    dest = os.path.join(_root(), rel_dest)
    if not os.path.isfile(src):
        raise DocumentStorageError("Uploaded document file is missing", payload=doc.document_path)

    created = not os.path.exists(dest)
    try:
        os.makedirs(os.path.dirname(dest), exist_ok=True)
        shutil.copy2(src, dest)
    except OSError as e:
        raise DocumentStorageError("Uploaded document could not be stored", payload=str(e)) from e
    log.info("staged document %s -> %s", doc.document_path, rel_dest)
    return {
        "url": document_url(rel_dest),
        "path": rel_dest,
        "name": doc.document_name,
        "source": doc.document_path,
        "created": created,
    }


def remove_stored_document(rel_path: str | None) -> None:
    if not rel_path:
        return
    full = os.path.join(_root(), rel_path)
    if os.path.isfile(full):
        os.remove(full)
        log.info("removed document %s", rel_path)
