"""Example: one channel, persistent, one-shot and weak subscriptions, deferred send."""

import asyncio
import logging

from txrx import Channel

logging.basicConfig(level=logging.INFO)


class Display:
    def __init__(self, name: str) -> None:
        self.name = name

    def show(self, x: int, y: int) -> None:
        print(f"{self.name}: moved to ({x}, {y})")


async def main() -> None:
    channel: Channel[str] = Channel()

    channel.rx.on("moved", lambda x, y: print(f"log: moved to ({x}, {y})"))
    channel.rx.once("moved", lambda x, y: print("first move only"))
    display = Display("display-1")
    handle = channel.rx.onweak("moved", display.show)

    channel.tx.send("moved", 1, 2)
    channel.tx.send("moved", 3, 4)

    del display
    print(f"display alive: {handle.alive}")
    delivered = await channel.tx.send_async("moved", 5, 6)
    print(f"delivered: {delivered}, messages: {channel.messages}")

    channel.clear()
    print(f"after clear: {channel.tx.send('moved', 7, 8)}")


if __name__ == "__main__":
    asyncio.run(main())
