import asyncio
import logging

from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .commands import CommandInterpreter
from .conf import EngineConfig
from .engine import DiveEngine
from .events import Category
from .rng import HmacRandomSource
from .scheduler import AsyncioScheduler

logger = logging.getLogger(__name__)


class DiveConsumer(AsyncJsonWebsocketConsumer):
    """
    One dive table per connection: its own engine, rng and timers.
    Client frames:  {"command": "bet 100 250m"} or {"type": "ping"}
    Server frames:  {"event": "message", "data": event}
                    {"event": "round_update", "data": view}
                    {"event": "error", "data": {"code": ..., "error": ...}}
    """

    # ===============================
    # CONNECTION
    # ===============================

    async def connect(self):
        await self.accept()

        self.outbox = asyncio.Queue()
        self.sender = asyncio.ensure_future(self._drain_outbox())

        rng = HmacRandomSource()
        self.engine = DiveEngine(
            AsyncioScheduler(),
            rng=rng,
            config=EngineConfig.from_settings(),
        )
        self.interpreter = CommandInterpreter(self.engine)
        self.engine.subscribe(self.queue_view)
        self.engine.subscribe_events(self.queue_event)

        await self.send_json({
            "event": "connected",
            "data": {"server_seed_hash": rng.server_seed_hash},
        })
        self.engine.start()

    async def disconnect(self, close_code):
        engine = getattr(self, "engine", None)
        if engine is not None:
            engine.teardown()
        sender = getattr(self, "sender", None)
        if sender is not None:
            sender.cancel()

    # ===============================
    # OUTBOUND
    # ===============================

    def queue_event(self, event):
        self.outbox.put_nowait({"event": "message", "data": event.to_dict()})
        # rejected commands also get an error frame
        if event.category == Category.ERROR and "code" in event.data:
            self.outbox.put_nowait({
                "event": "error",
                "data": {"code": event.data["code"], "error": event.text},
            })

    def queue_view(self, view):
        self.outbox.put_nowait({"event": "round_update", "data": view})

    async def _drain_outbox(self):
        # one writer keeps frames in the order the engine produced them
        while True:
            frame = await self.outbox.get()
            await self.send_json(frame)

    # ===============================
    # MESSAGE ROUTER
    # ===============================

    async def receive_json(self, content, **kwargs):
        try:
            if content.get("type") == "ping":
                await self.send_json({"event": "pong"})
                return

            command = content.get("command")
            if not isinstance(command, str):
                await self.send_error("invalid_message", "Expected a 'command' string")
                return

            self.interpreter.handle(command)

        except Exception as e:
            logger.exception("Command %r failed", content)
            await self.send_error("server_error", str(e))

    async def send_error(self, code, message):
        await self.send_json({"event": "error", "data": {"code": code, "error": message}})
