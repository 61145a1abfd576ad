"""
Local key/value storage for the device-side services.

Values are strings; callers serialize their own JSON. ``JsonFileStore``
keeps every key in one JSON document and rewrites it atomically.
"""
import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol, Tuple, Union, runtime_checkable

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth:token"
REFRESH_TOKEN_KEY = "auth:refresh-token"


@runtime_checkable
class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store, mostly for tests and headless use."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Persistent store backed by a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = asyncio.Lock()
        self._cache: Optional[Dict[str, str]] = None

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable store file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring store file {self.path}: top level is not an object")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    async def _load(self) -> Dict[str, str]:
        if self._cache is None:
            self._cache = await asyncio.to_thread(self._read)
        return self._cache

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            return (await self._load()).get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = dict(await self._load())
            data[key] = value
            await asyncio.to_thread(self._write, data)
            self._cache = data

    async def delete(self, key: str) -> None:
        async with self._lock:
            data = dict(await self._load())
            if data.pop(key, None) is None:
                return
            await asyncio.to_thread(self._write, data)
            self._cache = data


class TokenStore:
    """
    Holds the access and refresh tokens.

    Uses the platform's secure store when one is given, otherwise the
    general-purpose ``fallback`` store.
    """

    def __init__(self, fallback: KeyValueStore, secure: Optional[KeyValueStore] = None):
        self._store = secure if secure is not None else fallback
        self.is_secure = secure is not None
        if not self.is_secure:
            logger.info("No secure store available, keeping tokens in general storage")

    async def get_token(self) -> Optional[str]:
        return await self._store.get(TOKEN_KEY)

    async def get_refresh_token(self) -> Optional[str]:
        return await self._store.get(REFRESH_TOKEN_KEY)

    async def get_tokens(self) -> Tuple[Optional[str], Optional[str]]:
        return await self.get_token(), await self.get_refresh_token()

    async def set_tokens(self, token: str, refresh_token: Optional[str] = None) -> None:
        await self._store.set(TOKEN_KEY, token)
        if refresh_token is not None:
            await self._store.set(REFRESH_TOKEN_KEY, refresh_token)

    async def clear(self) -> None:
        await self._store.delete(TOKEN_KEY)
        await self._store.delete(REFRESH_TOKEN_KEY)
