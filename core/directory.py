from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Tuple

from .models import Channel

# Parsing/écriture de l'annuaire texte : une chaîne par ligne, "<nom>,<url>".
# Pas d'en-tête, pas de commentaires, pas d'échappement.

FIELD_SEP = ","
# Seuls \n, \r\n et \r séparent les lignes (pas \x0c, \x1c, \u2028...).
LINE_SEP_RE = re.compile(r"\r\n|\n|\r")


def parse_line(line: str) -> Channel | None:
    """Retourne la chaîne d'une ligne valide (exactement deux champs), sinon None."""
    line = line.strip()
    if not line:
        return None
    fields = line.split(FIELD_SEP)
    if len(fields) != 2:
        return None
    return Channel(name=fields[0], url=fields[1])


def parse_directory_report(text: str) -> Tuple[List[Channel], int]:
    """
    Comme parse_directory, mais renvoie aussi le nombre de lignes non vides rejetées
    (pour le log uniquement).
    """
    out: List[Channel] = []
    dropped = 0
    for raw in LINE_SEP_RE.split(text or ""):
        if not raw.strip():
            continue
        ch = parse_line(raw)
        if ch is None:
            dropped += 1
            continue
        out.append(ch)
    return out, dropped


def parse_directory(text: str) -> List[Channel]:
    """
    Convertit le texte de l'annuaire en objets Channel, dans l'ordre des lignes.
    Les lignes malformées (0, 1 ou 3+ champs) sont ignorées silencieusement.
    """
    return parse_directory_report(text)[0]


def format_directory(channels: Iterable[Channel]) -> str:
    """Sérialise au format ligne par ligne (inverse de parse_directory)."""
    return "".join(f"{ch.name}{FIELD_SEP}{ch.url}\n" for ch in channels)


def write_directory(channels: Iterable[Channel], path: Path):
    """Écrit l'annuaire dans un fichier texte UTF-8."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(format_directory(channels))
