"""Tests for infrastructure.i18n.lifecycle module."""

from unittest.mock import Mock

import pytest

from infrastructure.i18n.lifecycle import LifecycleObserver


@pytest.mark.unit
class TestLifecycleObserver:
    """Tests for foreground notifications."""

    def test_callbacks_run_in_order(self):
        observer = LifecycleObserver()
        calls = []
        observer.subscribe(lambda: calls.append("first"))
        observer.subscribe(lambda: calls.append("second"))

        observer.notify_foreground()

        assert calls == ["first", "second"]

    def test_unsubscribe(self):
        observer = LifecycleObserver()
        callback = Mock()
        unsubscribe = observer.subscribe(callback)

        unsubscribe()
        unsubscribe()
        observer.notify_foreground()

        callback.assert_not_called()

    def test_failing_callback_does_not_stop_others(self):
        observer = LifecycleObserver()
        calls = []

        def failing():
            calls.append("failing")
            raise RuntimeError("boom")

        healthy = Mock()
        observer.subscribe(failing)
        observer.subscribe(healthy)

        observer.notify_foreground()

        assert calls == ["failing"]
        healthy.assert_called_once_with()

    def test_no_subscribers(self):
        LifecycleObserver().notify_foreground()

    def test_translator_fetch_is_subscribed(self, make_translator):
        translator = make_translator()
        translator.fetch = Mock()
        observer = LifecycleObserver()

        translator.attach_lifecycle(observer)
        observer.notify_foreground()

        translator.fetch.assert_called_once_with()
