"""Tests for txrx.channel."""

import gc
import logging
from enum import Enum

from txrx import Channel, Rx, Settings, Tx
from txrx.registry import default_registry


class Signal(Enum):
    OPENED = "opened"
    CLOSED = "closed"


class Host:
    pass


class TestChannel:
    def test_new_channel_is_empty(self, channel):
        assert channel.messages == []
        assert isinstance(channel.tx, Tx)
        assert isinstance(channel.rx, Rx)

    def test_handles_are_stable(self, channel):
        assert channel.tx is channel.tx
        assert channel.rx is channel.rx

    def test_channels_do_not_share_registries(self, settings, make_recorder):
        first, second = Channel(settings=settings), Channel(settings=settings)
        listener = make_recorder()
        first.rx.on("evt", listener)

        assert second.tx.send("evt") is False
        assert second.messages == []

    def test_tx_and_rx_see_same_registry(self, channel, make_recorder):
        tx, rx = channel.tx, channel.rx
        listener = make_recorder()

        rx.on("evt", listener)
        assert tx.send("evt", 1) is True

        rx.off("evt", listener)
        assert tx.send("evt", 2) is False
        assert listener.calls == [(1,)]

    def test_handles_work_after_channel_reference_dropped(self, settings, make_recorder):
        channel = Channel(settings=settings)
        tx, rx = channel.tx, channel.rx
        del channel
        gc.collect()
        listener = make_recorder()

        rx.on("evt", listener)

        assert tx.send("evt", 1) is True
        assert listener.calls == [(1,)]

    def test_messages_lists_subscribed_identifiers(self, channel, make_recorder):
        token = object()
        listener = make_recorder()
        channel.rx.on("a", listener)
        channel.rx.on(2, listener)
        channel.rx.on(Signal.OPENED, listener)
        channel.rx.on(token, listener)

        assert channel.messages == ["a", 2, Signal.OPENED, token]

    def test_clear_removes_everything(self, channel, make_recorder):
        persistent, once, weak = make_recorder(), make_recorder(), make_recorder()
        channel.rx.on("a", persistent)
        channel.rx.once("b", once)
        channel.rx.onweak("c", weak)

        channel.clear()

        assert channel.messages == []
        for message in ("a", "b", "c"):
            assert channel.tx.send(message) is False
        assert persistent.calls == once.calls == weak.calls == []

    def test_channel_usable_after_clear(self, channel, make_recorder):
        channel.rx.on("evt", make_recorder())
        channel.clear()
        listener = make_recorder()

        channel.rx.on("evt", listener)

        assert channel.tx.send("evt", 1) is True
        assert listener.calls == [(1,)]

    def test_mixed_lifetimes_scenario(self, channel, make_recorder):
        l1, l2, l3 = make_recorder(), make_recorder(), make_recorder()
        channel.rx.on("evt", l1)
        channel.rx.once("evt", l2)
        channel.rx.onweak("evt", l3)

        assert channel.tx.send("evt", 1, 2) is True
        assert l1.calls == [(1, 2)]
        assert l2.calls == [(1, 2)]
        assert l3.calls == [(1, 2)]

        assert channel.tx.send("evt", 3, 4) is True
        assert l1.calls == [(1, 2), (3, 4)]
        assert l2.calls == [(1, 2)]
        assert l3.calls == [(1, 2), (3, 4)]

    def test_mixed_lifetimes_after_weak_referent_dropped(self, channel, make_recorder):
        l1, l2, l3 = make_recorder(), make_recorder(), make_recorder()
        weak_calls = l3.calls
        channel.rx.on("evt", l1)
        channel.rx.once("evt", l2)
        channel.rx.onweak("evt", l3)
        channel.tx.send("evt", 1, 2)

        del l3
        gc.collect()

        assert channel.tx.send("evt", 3, 4) is True
        assert l1.calls == [(1, 2), (3, 4)]
        assert l2.calls == [(1, 2)]
        assert weak_calls == [(1, 2)]

    def test_metrics(self, channel, make_recorder):
        channel.rx.on("evt", make_recorder())
        channel.rx.once("evt", make_recorder())

        channel.tx.send("evt")
        channel.tx.send("evt")
        channel.tx.send("other")

        counters = channel.metrics.snapshot()["counters"]
        assert counters["sends"] == 2
        assert counters["sends_empty"] == 1
        assert counters["deliveries"] == 3
        assert counters["once_fired"] == 1

    def test_messages_gauge_after_once_fires(self, channel, make_recorder):
        channel.rx.once("evt", make_recorder())
        assert channel.metrics.get_gauge("messages") == 1

        channel.tx.send("evt")

        assert channel.messages == []
        assert channel.metrics.get_gauge("messages") == 0

    def test_messages_gauge_after_weak_eviction(self, channel, make_recorder):
        listener = make_recorder()
        channel.rx.onweak("evt", listener)
        del listener
        gc.collect()

        channel.tx.send("evt")

        assert channel.messages == []
        assert channel.metrics.get_gauge("messages") == 0

    def test_metrics_disabled(self, make_recorder):
        channel = Channel(settings=Settings(metrics=False))
        channel.rx.on("evt", make_recorder())

        channel.tx.send("evt")

        assert channel.metrics.snapshot() == {"counters": {}, "gauges": {}}

    def test_unlocked_channel(self, make_recorder):
        channel = Channel(settings=Settings(threadsafe=False))
        listener = make_recorder()
        channel.rx.on("evt", listener)

        assert channel.tx.send("evt", 1) is True
        assert listener.calls == [(1,)]

    def test_log_level_follows_channel_settings(self, caplog, make_recorder):
        verbose = Channel(settings=Settings(log_level="DEBUG"))
        quiet = Channel(settings=Settings(log_level="WARNING"))

        assert verbose.tx._logger.getEffectiveLevel() == logging.DEBUG
        assert quiet.rx._logger.getEffectiveLevel() == logging.WARNING

        for ch in (verbose, quiet):
            ch.rx.on("evt", make_recorder())
            ch.tx.send("evt")

        events = [
            (r.channel, r.getMessage())
            for r in caplog.records
            if r.name in ("txrx.tx", "txrx.rx")
        ]
        assert (verbose.id, "subscribed") in events
        assert (verbose.id, "message_sent") in events
        assert all(channel_id != quiet.id for channel_id, _ in events)

    def test_channel_ids_are_unique(self):
        assert Channel().id != Channel().id


class TestChannelAssociation:
    def test_add_has_get(self):
        host = Host()
        assert Channel.has(host) is False
        assert Channel.get(host) is None

        Channel.add(host)

        try:
            assert Channel.has(host) is True
            channel = Channel.get(host)
            assert isinstance(channel, Channel)
            Channel.add(host)
            assert Channel.get(host) is channel
        finally:
            default_registry.discard(host)
