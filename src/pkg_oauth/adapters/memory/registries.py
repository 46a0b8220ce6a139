from __future__ import annotations

from typing import Dict, Iterable, Optional

from ...domain.entities import Client, User
from ...domain.ports import ClientRegistry, UserDirectory


class InMemoryClientRegistry(ClientRegistry):
    """Static client registry, filled once at construction."""

    def __init__(self, clients: Iterable[Client] = ()) -> None:
        self._clients: Dict[str, Client] = {}
        for client in clients:
            if client.client_id in self._clients:
                raise ValueError(f"Duplicate client id: {client.client_id!r}")
            self._clients[client.client_id] = client

    def find_by_client_id(self, client_id: str) -> Optional[Client]:
        return self._clients.get(client_id)

    def __len__(self) -> int:
        return len(self._clients)


class InMemoryUserDirectory(UserDirectory):
    """Static user directory, indexed by identifier."""

    def __init__(self, users: Iterable[User] = ()) -> None:
        self._by_id: Dict[str, User] = {}
        for user in users:
            self._by_id[user.identifier] = user

    def find_by_identifier(self, identifier: str) -> Optional[User]:
        return self._by_id.get(identifier)
