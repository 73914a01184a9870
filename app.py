from __future__ import annotations

import argparse
import sys
from functools import partial
from pathlib import Path

from PySide6 import QtCore

from applog import AppLog
from config import DEFAULT_CONFIG_PATH, load_config, save_config
from core.directory import write_directory
from core.fetch import fetch_directory_text
from core.manager import DirectoryManager
from storage import ChannelCache, Storage
from workers.refresh_worker import RefreshRunner

# Point d'entrée : une seule instance DirectoryManager pour tout le processus, rafraîchie
# en arrière-plan via RefreshRunner dans une boucle Qt (sans widgets).


def build_manager(cfg, log=None) -> DirectoryManager:
    cache = ChannelCache(Storage(cfg.db_path), log=log)
    fetcher = partial(fetch_directory_text, timeout=cfg.timeout)
    return DirectoryManager(cache, default_url=cfg.source_url, fetcher=fetcher, log=log)


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Télécharge et filtre un annuaire de chaînes (nom,url par ligne).")
    ap.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="Fichier de configuration JSON")
    ap.add_argument("--url", default="", help="URL de l'annuaire (défaut: source_url de la config)")
    ap.add_argument("--search", default="", help="Filtre sur le nom (insensible à la casse)")
    ap.add_argument("--offline", action="store_true", help="Ne pas télécharger, utiliser le cache seulement")
    ap.add_argument("--clear-cache", action="store_true", help="Vider le cache avant toute chose")
    ap.add_argument("--export", default="", help="Écrire l'annuaire filtré dans ce fichier")
    ap.add_argument("--save-url", action="store_true", help="Enregistrer --url comme source par défaut")
    ap.add_argument("--log-level", default="", help="ALL, DEBUG, INFO, WARN, ERROR")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    cfg_path = Path(args.config)
    cfg = load_config(cfg_path)

    log = AppLog(level=args.log_level or cfg.log_level, sink=lambda line: print(line, file=sys.stderr))

    if args.url and args.save_url:
        cfg.source_url = args.url
        if save_config(cfg, cfg_path):
            log.logln(f"Config: source enregistrée -> {args.url}")
        else:
            log.logln(f"Config: écriture impossible ({cfg_path})", level="WARN")

    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication(sys.argv[:1])
    manager = build_manager(cfg, log=log.logln)

    if args.clear_cache:
        manager.clear_cache()

    if not args.offline:
        runner = RefreshRunner(manager)
        runner.refresh_done.connect(lambda *_: app.quit() if not manager.is_loading else None)
        if runner.refresh(args.url or None) is not None:
            app.exec()
        runner.shutdown()

    manager.set_search_text(args.search)
    channels = manager.filtered_channels
    for ch in channels:
        print(f"{ch.name}\t{ch.url}")

    if args.export:
        try:
            write_directory(channels, Path(args.export))
            log.logln(f"Export: {len(channels)} chaînes -> {args.export}")
        except OSError as e:
            log.logexc("Export", e)

    if manager.error_message:
        log.logln(manager.error_message, level="ERROR")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
