from __future__ import annotations

import logging
import socket
from importlib import resources
from typing import Optional

from fulfillment_engine.settings import RobotSettings

logger = logging.getLogger(__name__)

BRAKE_RELEASE = "brake release\n"
STOP = "stop\n"
PROGRAM_RESOURCE = "pick_place.script"


class ActuatorError(Exception):
    def __init__(self, host: str, port: int, reason: str):
        super().__init__(f"{host}:{port}: {reason}")
        self.host = host
        self.port = port


def escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def ensure_newline(text: str) -> str:
    return text if text.endswith("\n") else text + "\n"


def load_program(name: str = PROGRAM_RESOURCE) -> str:
    return resources.files("fulfillment_engine").joinpath("programs").joinpath(name).read_text(encoding="ascii")


class RobotLink:
    """
    Fire-and-forget client for a robot controller.

    Two plaintext TCP channels: the control port takes one-line commands,
    the program port takes a script document. Every call opens a fresh
    connection, writes, and closes. Nothing is read back and nothing is
    retried; any socket failure surfaces as ActuatorError.
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        control_port: int = 29999,
        program_port: int = 30002,
        timeout: float = 5.0,
        program: Optional[str] = None,
    ):
        self.host = host
        self.control_port = control_port
        self.program_port = program_port
        self.timeout = timeout
        self._program = program

    @classmethod
    def from_settings(cls, settings: RobotSettings, program: Optional[str] = None) -> RobotLink:
        return cls(
            host=settings.host,
            control_port=settings.control_port,
            program_port=settings.program_port,
            timeout=settings.timeout,
            program=program,
        )

    @property
    def program(self) -> str:
        if self._program is None:
            self._program = load_program()
        return self._program

    def release_and_run(self) -> None:
        self._send(self.control_port, BRAKE_RELEASE)
        self._send(self.program_port, ensure_newline(self.program))

    def stop(self) -> None:
        self._send(self.control_port, STOP)

    def show_text(self, message: str) -> None:
        self._send(self.program_port, f'popup("{escape(message)}")\n')

    def text_message(self, message: str) -> None:
        self._send(self.program_port, f'textmsg("{escape(message)}")\n')

    def _send(self, port: int, message: str) -> None:
        try:
            data = message.encode("ascii")
        except UnicodeEncodeError as e:
            raise ActuatorError(self.host, port, f"non-ASCII payload: {e}") from e

        logger.debug("sending %d bytes to %s:%s", len(data), self.host, port)
        try:
            with socket.create_connection((self.host, port), timeout=self.timeout) as conn:
                conn.sendall(data)
        except OSError as e:
            raise ActuatorError(self.host, port, str(e) or type(e).__name__) from e
