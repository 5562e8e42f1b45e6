"""Options that adjust an outgoing HTTP request or the session that sends it."""

from __future__ import annotations

import ssl
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Iterator, Mapping, MutableMapping, Optional
from urllib.parse import urlsplit, urlunsplit

import requests
from requests.adapters import HTTPAdapter

DIAL_TIMEOUT = 30.0
_DEFAULT_PORTS = {"http": 80, "https": 443}


class RequestOption(ABC):
    """Something that changes a request before it is sent, or the client sending it."""

    @abstractmethod
    def apply_to_request(self, request: Any) -> None:
        """Modify a ``requests.Request`` or ``requests.PreparedRequest`` in place."""

    @abstractmethod
    def apply_to_client(self, client: requests.Session) -> None:
        """Modify the session that will send the request."""


def _set_header(headers: MutableMapping[str, str], name: str, value: str) -> None:
    for key in [k for k in headers if k.lower() == name.lower() and k != name]:
        del headers[key]
    headers[name] = value


@dataclass(frozen=True)
class HeaderOption(RequestOption):
    """Sets headers on the request, replacing any existing value."""

    headers: Mapping[str, str]

    def apply_to_request(self, request: Any) -> None:
        for name, value in self.headers.items():
            _set_header(request.headers, name, value)

    def apply_to_client(self, client: requests.Session) -> None:
        return None


@dataclass(frozen=True)
class HostOption(RequestOption):
    """Overrides the Host header of the request."""

    host: str

    def apply_to_request(self, request: Any) -> None:
        _set_header(request.headers, "Host", self.host)

    def apply_to_client(self, client: requests.Session) -> None:
        return None


@dataclass(frozen=True)
class OptionList(RequestOption):
    """Several options applied in order; the first error stops the rest."""

    options: tuple[RequestOption, ...] = ()

    def __iter__(self) -> Iterator[RequestOption]:
        return iter(self.options)

    def __len__(self) -> int:
        return len(self.options)

    def apply_to_request(self, request: Any) -> None:
        for option in self.options:
            option.apply_to_request(request)

    def apply_to_client(self, client: requests.Session) -> None:
        for option in self.options:
            option.apply_to_client(client)


class _TLSAdapter(HTTPAdapter):
    """Transport adapter that uses a given SSL context and a connect timeout."""

    def __init__(self, ssl_context: ssl.SSLContext, server_hostname: Optional[str] = None):
        self._ssl_context = ssl_context
        self._server_hostname = server_hostname
        super().__init__()

    def init_poolmanager(self, connections, maxsize, block=False, **pool_kwargs):
        pool_kwargs["ssl_context"] = self._ssl_context
        if self._server_hostname:
            pool_kwargs["server_hostname"] = self._server_hostname
            pool_kwargs["assert_hostname"] = self._server_hostname
        super().init_poolmanager(connections, maxsize, block=block, **pool_kwargs)

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        if timeout is None:
            timeout = (DIAL_TIMEOUT, None)
        return super().send(
            request, stream=stream, timeout=timeout, verify=verify, cert=cert, proxies=proxies
        )


class _IngressAdapter(_TLSAdapter):
    """Connects to the ingress address whenever the request targets host:port."""

    def __init__(self, ssl_context: ssl.SSLContext, host: str, ingress_host: str, port: str):
        self._host = host
        self._ingress_host = ingress_host
        self._port = str(port)
        super().__init__(ssl_context, server_hostname=host)

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        parts = urlsplit(request.url)
        port = parts.port or _DEFAULT_PORTS.get(parts.scheme)
        if parts.hostname == self._host and str(port) == self._port:
            request = request.copy()
            request.headers.setdefault("Host", parts.netloc)
            request.url = urlunsplit(parts._replace(netloc=f"{self._ingress_host}:{self._port}"))
        return super().send(
            request, stream=stream, timeout=timeout, verify=verify, cert=cert, proxies=proxies
        )


@dataclass(frozen=True)
class TLSOption(RequestOption):
    """Sends HTTPS requests for ``host`` to the ingress, trusting a given CA."""

    ca_cert_file: str
    host: str
    ingress_host: str
    secure_ingress_port: str
    client_cert_file: str = ""
    client_key_file: str = ""

    def with_client_certificate(self, client_cert_file: str, client_key_file: str) -> TLSOption:
        return replace(self, client_cert_file=client_cert_file, client_key_file=client_key_file)

    def apply_to_request(self, request: Any) -> None:
        _set_header(request.headers, "Host", self.host)

    def _ssl_context(self) -> ssl.SSLContext:
        ca_data = Path(self.ca_cert_file).read_text()
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        try:
            context.load_verify_locations(cadata=ca_data)
        except (ssl.SSLError, ValueError):
            pass  # an unusable CA file leaves the trust store empty
        if self.client_cert_file:
            if not self.client_key_file:
                raise ValueError("a client key file is required with a client certificate")
            context.load_cert_chain(self.client_cert_file, self.client_key_file)
        return context

    def apply_to_client(self, client: requests.Session) -> None:
        context = self._ssl_context()
        plain = _TLSAdapter(context)
        routed = _IngressAdapter(context, self.host, self.ingress_host, self.secure_ingress_port)
        for scheme, default_port in _DEFAULT_PORTS.items():
            client.mount(f"{scheme}://", plain)
            client.mount(f"{scheme}://{self.host}:{self.secure_ingress_port}/", routed)
            if str(default_port) == str(self.secure_ingress_port):
                client.mount(f"{scheme}://{self.host}/", routed)


def with_header(name: str, value: str) -> HeaderOption:
    """Return an option that sets one header."""
    return HeaderOption(headers={name: value})


def with_host(host: str) -> HostOption:
    """Return an option that sets the Host header."""
    return HostOption(host=host)


def combine(*args: RequestOption) -> OptionList:
    """Return an option that applies all given options in order."""
    return OptionList(tuple(args))


def with_tls(
    cacert_file: str, host: str, ingress_host: str, secure_ingress_port: str
) -> TLSOption:
    """Return an option that routes TLS traffic for ``host`` through the ingress."""
    return TLSOption(
        ca_cert_file=cacert_file,
        host=host,
        ingress_host=ingress_host,
        secure_ingress_port=secure_ingress_port,
    )