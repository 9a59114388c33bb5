"""Key-value store for the values the browser client keeps in local storage."""

LAST_LOGIN_KEY = "yalla-souq-last-login"
REMEMBER_EMAIL_KEY = "yalla-souq-remember-email"


class ClientStorage:
    """In-memory string store with the local-storage get/set/remove surface."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._items
