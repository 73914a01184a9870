from __future__ import annotations

# Erreurs du pipeline annuaire (fetch -> parse -> cache). Toutes sont rattrapées par
# DirectoryManager et converties en message d'erreur publié, aucune ne remonte plus haut.


class DirectoryError(Exception):
    """Erreur récupérable ; `message` est le texte affiché tel quel par l'UI."""

    message = "error"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)


class InvalidURLError(DirectoryError):
    message = "invalid URL"


class NetworkError(DirectoryError):
    def __init__(self, detail: str = ""):
        self.detail = (detail or "").strip()
        super().__init__(f"network error: {self.detail}" if self.detail else "network error")


class DecodeError(DirectoryError):
    message = "decode error"
