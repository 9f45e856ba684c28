"""Publish finished shorts to a Google Drive folder."""

import json
import os

import requests
from google.auth import exceptions as google_auth_exceptions
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from shortsbot.common import PipelineError, file_size_mb

SCOPES = ["https://www.googleapis.com/auth/drive.file"]
FILES_URL = "https://www.googleapis.com/drive/v3/files"
UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"
BOUNDARY = "---SHORTSBOT-BOUNDARY---"


class DriveUploader:
    """Uploads files into one Drive folder using a service account."""

    def __init__(self, folder_id, service_account_file, session=None):
        self.folder_id = folder_id
        self.service_account_file = service_account_file
        self._session = session

    @classmethod
    def from_config(cls, config):
        return cls(config.drive_folder_id, config.service_account_file)

    def _get_session(self):
        """Build an authorized session from the service account file."""
        if self._session is not None:
            return self._session
        if not os.path.exists(self.service_account_file):
            raise PipelineError(
                f"Service account file not found at {self.service_account_file}. "
                "Download it from Google Cloud Console and set "
                "GOOGLE_SERVICE_ACCOUNT_FILE"
            )
        try:
            credentials = service_account.Credentials.from_service_account_file(
                self.service_account_file, scopes=SCOPES)
        except (ValueError, KeyError, google_auth_exceptions.GoogleAuthError) as exc:
            raise PipelineError(
                f"Invalid service account file {self.service_account_file}: {exc}")
        self._session = AuthorizedSession(credentials)
        return self._session

    def _request(self, method, url, **kwargs):
        session = self._get_session()
        try:
            resp = session.request(method, url, timeout=300, **kwargs)
        except requests.RequestException as exc:
            raise PipelineError(f"Google Drive request failed: {exc}")
        except google_auth_exceptions.GoogleAuthError as exc:
            # token refresh or transport failure inside AuthorizedSession
            raise PipelineError(f"Google Drive authentication failed: {exc}")
        if resp.status_code >= 400:
            raise PipelineError(
                f"Google Drive API error: {resp.status_code} - {_error_message(resp)}")
        return resp.json() if resp.content else {}

    def find_existing(self, name):
        """Return the file dict for *name* already in the folder, or None."""
        query = (f"name='{name}' and '{self.folder_id}' in parents "
                 "and trashed=false")
        result = self._request("GET", FILES_URL, params={
            "q": query,
            "fields": "files(id,name,webViewLink)",
        })
        files = result.get("files") or []
        return files[0] if files else None

    def upload(self, file_path, name=None, mime_type="video/mp4"):
        """Upload *file_path* and share it with anyone holding the link.

        Args:
            file_path: Local file to upload.
            name: Name in Drive (defaults to the file's basename).
            mime_type: Content type of the upload.

        Returns:
            str: Shareable webViewLink.

        Raises:
            PipelineError: Missing folder id, credentials or file, or an
            API error.
        """
        if not self.folder_id:
            raise PipelineError(
                "DRIVE_FOLDER_ID is not set in environment variables. "
                "Add your Google Drive folder ID to .env"
            )
        if not os.path.exists(file_path):
            raise PipelineError(f"File not found: {file_path}")

        name = name or os.path.basename(file_path)
        print(f"[Drive] Uploading {name} ({file_size_mb(file_path):.1f} MB)...")

        existing = self.find_existing(name)
        if existing:
            print(f"[Drive] SKIP (already uploaded): {existing['id']}")
            return existing.get("webViewLink") or _view_link(existing["id"])

        with open(file_path, "rb") as f:
            file_data = f.read()
        metadata = json.dumps({"name": name, "parents": [self.folder_id]}).encode()
        body = (
            f"--{BOUNDARY}\r\nContent-Type: application/json; charset=UTF-8\r\n\r\n".encode()
            + metadata
            + f"\r\n--{BOUNDARY}\r\nContent-Type: {mime_type}\r\n\r\n".encode()
            + file_data
            + f"\r\n--{BOUNDARY}--".encode()
        )
        result = self._request(
            "POST", UPLOAD_URL,
            params={"uploadType": "multipart", "fields": "id,name,webViewLink"},
            data=body,
            headers={"Content-Type": f"multipart/related; boundary={BOUNDARY}"},
        )

        file_id = result["id"]
        link = result.get("webViewLink") or _view_link(file_id)

        self._request("POST", f"{FILES_URL}/{file_id}/permissions",
                      json={"role": "reader", "type": "anyone"})

        print(f"[Drive] Upload complete: {result.get('name', name)}")
        print(f"[Drive] File ID: {file_id}")
        return link


def _view_link(file_id):
    return f"https://drive.google.com/file/d/{file_id}/view"


def _error_message(resp):
    try:
        return resp.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return resp.text[:300] or resp.reason
