"""
External image hosting for avatars (Cloudinary REST API over httpx).
"""

from __future__ import annotations

import hashlib
import logging
import re
import time
from dataclasses import dataclass
from typing import Optional, Protocol
from urllib.parse import urlparse

import httpx

from tasky import errors
from tasky.core.config import settings

log = logging.getLogger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"
AVATAR_TRANSFORMATION = "c_fill,h_400,w_400/q_auto"

_VERSION_RE = re.compile(r"^v\d+$")


@dataclass(frozen=True)
class UploadedAsset:
    url: str
    public_id: str


class AssetHost(Protocol):
    async def upload(
        self, data: bytes, *, content_type: str, filename: str = "avatar"
    ) -> UploadedAsset: ...

    async def destroy(self, public_id: str) -> None: ...


def public_id_from_url(url: str) -> Optional[str]:
    """
    ``https://res.cloudinary.com/<cloud>/image/upload/v123/tasky-avatars/abc.jpg``
    -> ``tasky-avatars/abc``
    """
    if not url:
        return None
    parts = [p for p in urlparse(url).path.split("/") if p]
    if "upload" in parts:
        parts = parts[parts.index("upload") + 1:]
        # skip chained transformations (c_fill,w_400) and the version (v1712345678)
        while parts and ("," in parts[0] or _VERSION_RE.match(parts[0])):
            parts = parts[1:]
    elif parts:
        parts = parts[-1:]
    if not parts:
        return None
    last = parts[-1].rsplit(".", 1)[0]
    public_id = "/".join(parts[:-1] + [last])
    return public_id or None


def sign_params(params: dict[str, str], api_secret: str) -> str:
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] != "")
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryAssetHost:
    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        *,
        folder: str = "tasky-avatars",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _endpoint(self, action: str) -> str:
        return f"{CLOUDINARY_API_BASE}/{self.cloud_name}/image/{action}"

    def _signed(self, params: dict[str, str]) -> dict[str, str]:
        params = {**params, "timestamp": str(int(time.time()))}
        params["signature"] = sign_params(params, self.api_secret)
        params["api_key"] = self.api_key
        return params

    async def _post(self, action: str, *, data: dict, files: dict | None = None) -> dict:
        if not self.configured:
            raise errors.UpstreamError("Avatar storage is not configured")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as http:
                r = await http.post(self._endpoint(action), data=data, files=files)
        except httpx.HTTPError as exc:
            raise errors.UpstreamError(f"Asset host unreachable: {exc.__class__.__name__}")
        if r.status_code != 200:
            log.warning("asset host %s failed: %s %s", action, r.status_code, r.text[:200])
            raise errors.UpstreamError(f"Asset host {action} failed")
        return r.json()

    async def upload(
        self, data: bytes, *, content_type: str, filename: str = "avatar"
    ) -> UploadedAsset:
        params = self._signed(
            {"folder": self.folder, "transformation": AVATAR_TRANSFORMATION}
        )
        body = await self._post(
            "upload", data=params, files={"file": (filename, data, content_type)}
        )
        url = body.get("secure_url") or body.get("url")
        if not url:
            raise errors.UpstreamError("Asset host returned no URL")
        return UploadedAsset(url=url, public_id=body.get("public_id") or public_id_from_url(url) or "")

    async def destroy(self, public_id: str) -> None:
        body = await self._post("destroy", data=self._signed({"public_id": public_id}))
        if body.get("result") not in ("ok", "not found"):
            raise errors.UpstreamError(f"Asset host refused destroy: {body.get('result')}")


def get_asset_host() -> AssetHost:
    """FastAPI dependency; tests override it with a fake host."""
    return CloudinaryAssetHost(
        settings.cloudinary_cloud_name,
        settings.cloudinary_api_key,
        settings.cloudinary_api_secret,
        folder=settings.avatar_folder,
        timeout=settings.asset_host_timeout_seconds,
    )
