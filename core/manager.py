from __future__ import annotations

from typing import Callable, List, Optional

from .directory import parse_directory_report
from .errors import DirectoryError, InvalidURLError, NetworkError
from .fetch import fetch_directory_text, is_valid_url
from .models import Channel, DirectoryState
from .query import filter_channels

# État partagé de l'annuaire : une seule instance par processus, injectée dans chaque écran.
# Aucune dépendance Qt ici ; workers/refresh_worker.py fait le pont asynchrone.

Observer = Callable[[DirectoryState], None]


class DirectoryManager:
    """
    Orchestre fetch -> parse -> cache -> publication.

    Les dernières chaînes valides sont conservées pendant un refresh et après un échec ;
    elles ne sont remplacées que par un refresh réussi. Chaque refresh reçoit un numéro de
    génération : seule la complétion de la requête la plus récente est appliquée.
    Toutes les mutations se font sur le thread appelant (pas de verrou).
    """

    def __init__(self, cache, default_url: str, fetcher: Callable[[str], str] | None = None, log=None):
        self.cache = cache
        self.default_url = default_url
        self.fetcher = fetcher or fetch_directory_text
        self.log = log or (lambda s, level="INFO": None)

        self.channels: List[Channel] = []
        self.is_loading = False
        self.error_message: Optional[str] = None
        self.search_text = ""
        self.generation = 0
        self.last_url: Optional[str] = None

        self._observers: list[Observer] = []
        self.initialize()

    def initialize(self) -> None:
        cached = self.cache.load()
        self.channels = list(cached) if cached else []
        if cached:
            self.log(f"Annuaire: {len(self.channels)} chaînes chargées depuis le cache.")

    # -------------------------
    # Observateurs
    # -------------------------
    @property
    def state(self) -> DirectoryState:
        return DirectoryState(
            channels=tuple(self.channels),
            is_loading=self.is_loading,
            error_message=self.error_message,
            search_text=self.search_text,
        )

    def subscribe(self, callback: Observer) -> Callable[[], None]:
        """Enregistre un observateur ; retourne la fonction de désinscription."""
        self._observers.append(callback)

        def unsubscribe():
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def _publish(self) -> None:
        snapshot = self.state
        for cb in list(self._observers):
            try:
                cb(snapshot)
            except Exception as e:
                self.log(f"Annuaire: observateur en erreur ({type(e).__name__}: {e})", level="ERROR")

    # -------------------------
    # Recherche
    # -------------------------
    @property
    def filtered_channels(self) -> List[Channel]:
        return filter_channels(self.channels, self.search_text)

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    def set_search_text(self, text: str) -> None:
        text = text or ""
        if text == self.search_text:
            return
        self.search_text = text
        self._publish()

    # -------------------------
    # Refresh
    # -------------------------
    def start_refresh(self, source_url: str | None = None) -> Optional[int]:
        """
        Valide l'URL et passe en chargement. Retourne le numéro de génération à rendre
        à finish_refresh/fail_refresh, ou None si l'URL est invalide (aucun appel réseau).
        """
        url = source_url or self.default_url
        self.last_url = url
        self.generation += 1
        if not is_valid_url(url):
            # Rend obsolète toute requête encore en vol.
            self.is_loading = False
            self.error_message = InvalidURLError().message
            self.log(f"Annuaire: URL invalide: {url!r}", level="WARN")
            self._publish()
            return None

        self.is_loading = True
        self.error_message = None
        self.log(f"Annuaire: téléchargement #{self.generation} -> {url}", level="DEBUG")
        self._publish()
        return self.generation

    def _is_stale(self, generation: int) -> bool:
        if generation != self.generation:
            self.log(f"Annuaire: réponse #{generation} obsolète ignorée (courante #{self.generation}).", level="DEBUG")
            return True
        return False

    def finish_refresh(self, generation: int, text: str) -> bool:
        """Applique un corps téléchargé. Retourne False si la complétion est obsolète."""
        if self._is_stale(generation):
            return False
        channels, dropped = parse_directory_report(text)
        if dropped:
            self.log(f"Annuaire: {dropped} ligne(s) ignorée(s).", level="DEBUG")
        self.channels = channels
        self.is_loading = False
        self.error_message = None
        self.cache.save(channels)
        self.log(f"Annuaire: chargement OK ({len(channels)}).")
        self._publish()
        return True

    def fail_refresh(self, generation: int, error: Exception) -> bool:
        """Passe en échec sans toucher aux chaînes. Retourne False si obsolète."""
        if self._is_stale(generation):
            return False
        if isinstance(error, DirectoryError):
            message = error.message
        else:
            message = f"network error: {error}"
        self.is_loading = False
        self.error_message = message
        self.log(f"Annuaire: erreur: {message}", level="ERROR")
        self._publish()
        return True

    def refresh(self, source_url: str | None = None) -> bool:
        """Version bloquante (fetch sur le thread appelant). Retourne True si succès."""
        url = source_url or self.default_url
        generation = self.start_refresh(url)
        if generation is None:
            return False
        try:
            text = self.fetcher(url)
        except DirectoryError as e:
            self.fail_refresh(generation, e)
            return False
        except Exception as e:
            self.fail_refresh(generation, NetworkError(f"{type(e).__name__}: {e}"))
            return False
        return self.finish_refresh(generation, text)

    def retry(self) -> bool:
        return self.refresh(self.last_url)

    def ensure_loaded(self, source_url: str | None = None) -> bool:
        """Lance un refresh seulement si l'annuaire est vide."""
        if self.channels:
            return True
        return self.refresh(source_url)

    def clear_cache(self) -> None:
        """Vide le cache et l'annuaire en mémoire ; chargement/erreur inchangés."""
        self.cache.clear()
        self.channels = []
        self.log("Annuaire: cache vidé.")
        self._publish()
