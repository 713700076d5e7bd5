"""Regression tests for the socket acquisition policy and fallback binding."""

from __future__ import annotations

import logging
import socket

import pytest

from dewy_testapp.config import AppSettings
from dewy_testapp.domain import ServingMode
from dewy_testapp.listeners import ListenerBindError, listeners_acquire, listeners_bind_standalone


def _build_settings() -> AppSettings:
    """Create settings that bind an ephemeral loopback port in fallback mode.

    Returns:
        AppSettings: Deterministic test settings.
    """

    return AppSettings(fallback_host="127.0.0.1", fallback_port=3333)


@pytest.fixture
def ephemeral_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    """Bind fallback sockets to port 0 so tests never collide on 3333.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
    """

    import dewy_testapp.listeners.acquisition as acquisition_module

    original_bind = acquisition_module.listeners_bind_standalone

    def _bind_ephemeral(host: str, port: int, backlog: int = 2048):
        _ = port
        return original_bind(host=host, port=0, backlog=backlog)

    monkeypatch.setattr(acquisition_module, "listeners_bind_standalone", _bind_ephemeral)


def test_listeners_bind_standalone_listens_on_requested_address() -> None:
    """Bind, listen and describe a self-opened socket.

    Returns:
        None: Assertions validate bound socket state.

    Raises:
        AssertionError: Raised when the socket is not listening.
    """

    acquired = listeners_bind_standalone(host="127.0.0.1", port=0)
    try:
        assert acquired.port is not None and acquired.port > 0
        assert acquired.address == f"127.0.0.1:{acquired.port}"
        with socket.create_connection(("127.0.0.1", acquired.port), timeout=2):
            pass
    finally:
        acquired.sock.close()


def test_listeners_bind_standalone_raises_bind_error_when_port_is_taken() -> None:
    occupied = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    occupied.bind(("127.0.0.1", 0))
    occupied.listen(1)
    try:
        with pytest.raises(ListenerBindError, match="failed to bind"):
            listeners_bind_standalone(host="127.0.0.1", port=occupied.getsockname()[1])
    finally:
        occupied.close()


def test_listeners_bind_error_is_an_os_error() -> None:
    assert issubclass(ListenerBindError, OSError)


def test_listeners_acquire_binds_fallback_without_handoff_variable(ephemeral_fallback) -> None:
    """Bind the fallback address when the handoff variable is absent.

    Args:
        ephemeral_fallback: Fixture rebinding fallback to an ephemeral port.

    Returns:
        None: Assertions validate standalone acquisition.

    Raises:
        AssertionError: Raised when acquisition does not fall back.
    """

    acquisition = listeners_acquire(_build_settings(), environ={})
    try:
        assert acquisition.mode is ServingMode.STANDALONE
        assert len(acquisition.listeners) == 1
        assert acquisition.server_starter_env == ""
    finally:
        for listener in acquisition.listeners:
            listener.sock.close()


def test_listeners_acquire_treats_empty_handoff_variable_as_absent(ephemeral_fallback) -> None:
    acquisition = listeners_acquire(_build_settings(), environ={"SERVER_STARTER_PORT": ""})
    try:
        assert acquisition.mode is ServingMode.STANDALONE
    finally:
        for listener in acquisition.listeners:
            listener.sock.close()


def test_listeners_acquire_adopts_supervisor_sockets() -> None:
    """Adopt every inherited socket when the handoff variable is valid.

    Returns:
        None: Assertions validate server-starter acquisition.

    Raises:
        AssertionError: Raised when inherited sockets are not adopted.
    """

    supervisor_sockets = [listeners_bind_standalone(host="127.0.0.1", port=0) for _ in range(3)]
    raw_value = ";".join(f"{listener.address}={listener.sock.fileno()}" for listener in supervisor_sockets)
    try:
        acquisition = listeners_acquire(_build_settings(), environ={"SERVER_STARTER_PORT": raw_value})
        try:
            assert acquisition.mode is ServingMode.SERVER_STARTER
            assert [listener.address for listener in acquisition.listeners] == [
                listener.address for listener in supervisor_sockets
            ]
            assert acquisition.server_starter_env == raw_value
        finally:
            for listener in acquisition.listeners:
                listener.sock.close()
    finally:
        for listener in supervisor_sockets:
            listener.sock.close()


def test_listeners_acquire_honours_custom_handoff_variable_name() -> None:
    supervisor = listeners_bind_standalone(host="127.0.0.1", port=0)
    settings = AppSettings(fallback_host="127.0.0.1", server_starter_env_name="CUSTOM_HANDOFF")
    try:
        acquisition = listeners_acquire(
            settings,
            environ={"CUSTOM_HANDOFF": f"{supervisor.address}={supervisor.sock.fileno()}"},
        )
        try:
            assert acquisition.mode is ServingMode.SERVER_STARTER
        finally:
            for listener in acquisition.listeners:
                listener.sock.close()
    finally:
        supervisor.sock.close()


def test_listeners_acquire_falls_back_and_logs_on_handoff_failure(
    ephemeral_fallback, caplog: pytest.LogCaptureFixture
) -> None:
    """Log the handoff failure at error level and bind the fallback address.

    Args:
        ephemeral_fallback: Fixture rebinding fallback to an ephemeral port.
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate fallback and log records.

    Raises:
        AssertionError: Raised when fallback or logging is missing.
    """

    caplog.set_level(logging.INFO, logger="dewy_testapp.listeners.acquisition")

    acquisition = listeners_acquire(_build_settings(), environ={"SERVER_STARTER_PORT": "garbage"})
    try:
        assert acquisition.mode is ServingMode.STANDALONE
        assert acquisition.server_starter_env == "garbage"
    finally:
        for listener in acquisition.listeners:
            listener.sock.close()

    error_records = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert [record.getMessage() for record in error_records] == ["Failed to get listeners from server-starter"]
    assert "garbage" in error_records[0].error
    assert any(record.getMessage() == "Falling back to standalone mode" for record in caplog.records)


@pytest.mark.skipif(not hasattr(socket, "SO_ACCEPTCONN"), reason="SO_ACCEPTCONN unavailable")
def test_listeners_acquire_falls_back_when_handoff_names_connected_socket(
    ephemeral_fallback, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="dewy_testapp.listeners.acquisition")
    server = listeners_bind_standalone(host="127.0.0.1", port=0)
    client = socket.create_connection(("127.0.0.1", server.port), timeout=2)
    try:
        acquisition = listeners_acquire(
            _build_settings(), environ={"SERVER_STARTER_PORT": f"127.0.0.1:1={client.fileno()}"}
        )
        try:
            assert acquisition.mode is ServingMode.STANDALONE
            assert [listener.sock.fileno() for listener in acquisition.listeners] != [client.fileno()]
        finally:
            for listener in acquisition.listeners:
                listener.sock.close()
    finally:
        client.close()
        server.sock.close()

    error_records = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert "not a listening socket" in error_records[0].error


def test_listeners_acquire_propagates_fallback_bind_failure() -> None:
    occupied = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    occupied.bind(("127.0.0.1", 0))
    occupied.listen(1)
    settings = AppSettings(fallback_host="127.0.0.1", fallback_port=occupied.getsockname()[1])
    try:
        with pytest.raises(ListenerBindError):
            listeners_acquire(settings, environ={})
    finally:
        occupied.close()
