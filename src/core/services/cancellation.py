"""Cancelación compuesta (timeout + señal del caller).

Por qué un token propio:
- asyncio solo ofrece cancelación de tareas; aquí necesitamos una señal que
  varias fuentes puedan disparar y que el transporte observe de forma
  cooperativa.
- La primera fuente que dispara fija el motivo (`reason`); los disparos
  posteriores se ignoran.

Contrato de `composite_cancellation`:
- Crea un token nuevo por llamada.
- Si el timeout es positivo programa un temporizador que lo cancela.
- Si la señal del caller ya está cancelada, el compuesto nace cancelado con
  el mismo motivo; si no, escucha una única vez su cancelación.
- El temporizador y la suscripción se liberan siempre al salir del bloque.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, TypeVar

T = TypeVar("T")

CancelCallback = Callable[["CancellationToken"], None]


class RequestAborted(Exception):
    """La llamada se abortó porque el token compuesto se disparó."""

    def __init__(self, reason: object = None) -> None:
        super().__init__("Request aborted")
        self.reason = reason


class RequestTimedOut(TimeoutError):
    def __init__(self, timeout_ms: int) -> None:
        super().__init__(f"Request timed out after {timeout_ms} ms")
        self.timeout_ms = timeout_ms


class CancellationToken:
    """Señal de cancelación de un solo disparo."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: object = None
        self._callbacks: list[CancelCallback] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> object:
        return self._reason

    def cancel(self, reason: object = None) -> bool:
        """Dispara el token. Devuelve False si ya estaba cancelado."""

        if self._event.is_set():
            return False
        self._reason = reason if reason is not None else RequestAborted()
        self._event.set()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)
        return True

    def add_callback(self, callback: CancelCallback) -> Callable[[], None]:
        """Registra `callback` para el disparo y devuelve la función de baja."""

        if self._event.is_set():
            callback(self)
            return lambda: None
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass

        return unsubscribe

    async def wait(self) -> object:
        await self._event.wait()
        return self._reason

    def __repr__(self) -> str:
        state = f"cancelled reason={self._reason!r}" if self.cancelled else "pending"
        return f"<CancellationToken {state}>"


@asynccontextmanager
async def composite_cancellation(
    signal: CancellationToken | None,
    timeout_ms: int | None,
) -> AsyncIterator[CancellationToken]:
    composite = CancellationToken()
    loop = asyncio.get_running_loop()

    timer: asyncio.TimerHandle | None = None
    if timeout_ms and timeout_ms > 0:
        timer = loop.call_later(timeout_ms / 1000, composite.cancel, RequestTimedOut(timeout_ms))

    unsubscribe: Callable[[], None] | None = None
    if signal is not None:
        if signal.cancelled:
            composite.cancel(signal.reason)
        else:
            unsubscribe = signal.add_callback(lambda source: composite.cancel(source.reason))

    try:
        yield composite
    finally:
        if timer is not None:
            timer.cancel()
        if unsubscribe is not None:
            unsubscribe()


async def run_cancellable(awaitable: Awaitable[T], token: CancellationToken) -> T:
    """Espera `awaitable` salvo que `token` se dispare antes.

    Si el token gana la carrera, la tarea en curso se cancela y se lanza
    `RequestAborted` con el motivo del token.
    """

    if token.cancelled:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise RequestAborted(token.reason)

    work = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait())
    try:
        done, _ = await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (work, waiter):
            if not task.done():
                task.cancel()

    if work in done:
        return work.result()

    await asyncio.gather(work, return_exceptions=True)
    raise RequestAborted(token.reason)
