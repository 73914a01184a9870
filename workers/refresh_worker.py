from __future__ import annotations

from typing import Callable

from PySide6 import QtCore

from core.errors import DirectoryError, NetworkError
from core.manager import DirectoryManager

# Worker Qt: télécharge l'annuaire dans un QThread et rapatrie le résultat sur le thread
# propriétaire du DirectoryManager (connexions queued), où toutes les mutations ont lieu.


class RefreshWorker(QtCore.QObject):
    """Un téléchargement = un worker = un QThread. Pas d'annulation."""

    fetched = QtCore.Signal(int, str)  # generation, body
    failed = QtCore.Signal(int, object)  # generation, exception
    finished = QtCore.Signal()

    def __init__(self, generation: int, url: str, fetcher: Callable[[str], str]):
        super().__init__()
        self.generation = int(generation)
        self.url = url
        self.fetcher = fetcher

    @QtCore.Slot()
    def run(self):
        try:
            text = self.fetcher(self.url)
        except DirectoryError as e:
            self.failed.emit(self.generation, e)
        except Exception as e:
            self.failed.emit(self.generation, NetworkError(f"{type(e).__name__}: {e}"))
        else:
            self.fetched.emit(self.generation, text)
        finally:
            self.finished.emit()


class RefreshRunner(QtCore.QObject):
    """
    Lance les refresh en arrière-plan pour un DirectoryManager partagé.
    Doit vivre sur le thread qui possède le manager : les slots ci-dessous y sont exécutés.
    """

    refresh_done = QtCore.Signal(int, bool)  # generation, applied

    def __init__(self, manager: DirectoryManager, parent=None):
        super().__init__(parent)
        self.manager = manager
        self._jobs: dict[int, tuple[QtCore.QThread, RefreshWorker]] = {}

    def refresh(self, source_url: str | None = None) -> int | None:
        generation = self.manager.start_refresh(source_url)
        if generation is None:
            return None

        thread = QtCore.QThread(self)
        worker = RefreshWorker(generation, self.manager.last_url, self.manager.fetcher)
        worker.moveToThread(thread)

        thread.started.connect(worker.run)
        worker.fetched.connect(self._on_fetched)
        worker.failed.connect(self._on_failed)
        worker.finished.connect(thread.quit)
        worker.finished.connect(worker.deleteLater)
        thread.finished.connect(self._reap_finished)

        self._jobs[generation] = (thread, worker)
        thread.start()
        return generation

    def pending(self) -> int:
        return len(self._jobs)

    @QtCore.Slot(int, str)
    def _on_fetched(self, generation: int, text: str):
        applied = self.manager.finish_refresh(generation, text)
        self.refresh_done.emit(generation, applied)

    @QtCore.Slot(int, object)
    def _on_failed(self, generation: int, error: object):
        applied = self.manager.fail_refresh(generation, error)
        self.refresh_done.emit(generation, applied)

    @QtCore.Slot()
    def _reap_finished(self):
        thread = self.sender()
        for generation, (job_thread, _worker) in list(self._jobs.items()):
            if job_thread is thread:
                self._jobs.pop(generation, None)
                job_thread.deleteLater()
                break

    def shutdown(self, timeout_ms: int = 3000):
        """Attend la fin des threads en cours (aucune annulation possible)."""
        for thread, _worker in list(self._jobs.values()):
            thread.quit()
            thread.wait(timeout_ms)
        self._jobs.clear()


class StateSignals(QtCore.QObject):
    """Ré-émet chaque instantané du manager sous forme de signal Qt pour l'UI."""

    state_changed = QtCore.Signal(object)  # DirectoryState

    def __init__(self, manager: DirectoryManager, parent=None):
        super().__init__(parent)
        self._unsubscribe = manager.subscribe(self.state_changed.emit)

    def detach(self):
        self._unsubscribe()
