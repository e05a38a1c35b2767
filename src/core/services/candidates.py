"""Normalización de URLs y generación de candidatos.

Por qué en services:
- Es lógica pura (sin I/O): recibe un string y devuelve URLs a probar.
- La lista de sufijos públicos viene del snapshot incluido en `tldextract`,
  así que el resultado no depende de la red.

Reglas:
- Entrada sin `http://`/`https://` => se asume `https://`.
- Primero el host tal cual, luego su dominio registrable (si es distinto).
"""

from __future__ import annotations

import ipaddress
import re
from urllib.parse import quote, urlsplit

import tldextract

from core.domain.errors import InvalidUrl, MissingHost
from core.domain.models import Candidate, CandidateKind

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_DEFAULT_PORTS = {"http": 80, "https": 443}

# `%` queda fuera del escape para que una secuencia ya codificada no cambie.
_PATH_SAFE = "/%:@!$&'()*+,;="
_QUERY_SAFE = _PATH_SAFE + "?"

# Sin URLs remotas: solo el snapshot empaquetado. Incluye sufijos privados
# (github.io, blogspot.com...) para que `user.github.io` sea su propio dominio.
_PSL = tldextract.TLDExtract(
    suffix_list_urls=(),
    cache_dir=None,
    include_psl_private_domains=True,
)


def _encode_host(host: str, raw: str) -> str:
    if host.isascii():
        return host
    try:
        return host.encode("idna").decode("ascii")
    except UnicodeError as exc:
        raise InvalidUrl(f"Invalid URL {raw!r}: bad host ({exc})") from exc


def _format_host(host: str) -> str:
    # IPv6 literal: `urlsplit().hostname` quita los corchetes.
    return f"[{host}]" if ":" in host else host


def normalize_url(raw: str) -> str:
    """Convierte la entrada del usuario en una URL absoluta canónica.

    `example.com` -> `https://example.com/`. Aplicarla sobre su propia salida
    no cambia nada.
    """

    value = raw.strip()
    if not _SCHEME_RE.match(value):
        value = f"https://{value}"

    try:
        parts = urlsplit(value)
        port = parts.port
    except ValueError as exc:
        raise InvalidUrl(f"Invalid URL {raw!r}: {exc}") from exc

    if any(ch.isspace() for ch in parts.netloc):
        raise InvalidUrl(f"Invalid URL {raw!r}: whitespace in host")

    host = parts.hostname
    if not host:
        raise MissingHost()

    scheme = parts.scheme.lower()
    netloc = _format_host(_encode_host(host, raw))
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{netloc}:{port}"
    userinfo, sep, _ = parts.netloc.rpartition("@")
    if sep:
        netloc = f"{userinfo}@{netloc}"

    path = quote(parts.path or "/", safe=_PATH_SAFE)
    url = f"{scheme}://{netloc}{path}"
    if parts.query:
        url += f"?{quote(parts.query, safe=_QUERY_SAFE)}"
    if parts.fragment:
        url += f"#{quote(parts.fragment, safe=_QUERY_SAFE)}"
    return url


def extract_host(url: str) -> str:
    """Host de una URL ya normalizada (IPv6 con corchetes)."""

    host = urlsplit(url).hostname
    if not host:
        raise MissingHost()
    return _format_host(host)


def registrable_domain(host: str) -> str | None:
    """Dominio registrable (eTLD+1) según la Public Suffix List.

    `sub.example.co.uk` -> `example.co.uk`. IPs y sufijos desnudos => None.
    """

    bare = host.strip("[]")
    try:
        ipaddress.ip_address(bare)
        return None
    except ValueError:
        pass

    ext = _PSL(bare)
    if not ext.domain or not ext.suffix:
        return None
    return f"{ext.domain}.{ext.suffix}"


def build_candidates(url: str) -> list[Candidate]:
    """Genera los candidatos a probar: host y, si difiere, dominio registrable."""

    scheme = urlsplit(url).scheme
    host = extract_host(url)

    seen: set[str] = set()
    candidates: list[Candidate] = []

    host_url = f"{scheme}://{host}"
    seen.add(host_url)
    candidates.append(Candidate(url=host_url, kind=CandidateKind.HOST))

    domain = registrable_domain(host)
    if domain and host.endswith("."):
        # FQDN: el dominio conserva el punto final igual que el host.
        domain = f"{domain}."
    if domain:
        domain_url = f"{scheme}://{domain}"
        if domain_url not in seen:
            seen.add(domain_url)
            candidates.append(Candidate(url=domain_url, kind=CandidateKind.DOMAIN))

    return candidates
