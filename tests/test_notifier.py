from types import SimpleNamespace

from rappel.notification import notifier as notifier_module
from rappel.notification.notifier import Notifier


async def test_log_only_mode_counts_without_popup(monkeypatch):
    calls = []
    monkeypatch.setattr(notifier_module, "notification", SimpleNamespace(notify=lambda **kw: calls.append(kw)))

    notifier = Notifier(enabled=False)
    await notifier.notify("Courses", "Buy milk")

    assert calls == []
    assert notifier.sent_count == 1


async def test_popup_uses_plyer(monkeypatch):
    calls = []
    monkeypatch.setattr(notifier_module, "notification", SimpleNamespace(notify=lambda **kw: calls.append(kw)))

    notifier = Notifier(app_name="rappel-test", timeout=3, enabled=True)
    await notifier.notify("Courses", "Buy milk")

    assert calls == [{"title": "Courses", "message": "Buy milk", "app_name": "rappel-test", "timeout": 3}]
    assert notifier.sent_count == 1


async def test_popup_failure_is_swallowed(monkeypatch):
    def broken(**kwargs):
        raise NotImplementedError("no backend")

    monkeypatch.setattr(notifier_module, "notification", SimpleNamespace(notify=broken))

    notifier = Notifier(enabled=True)
    await notifier.notify("Courses", "Buy milk")

    assert notifier.sent_count == 0
