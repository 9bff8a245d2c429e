"""Tests for the demo-mode context."""

from pocket_arcade.wallet.demo import DemoContext, DemoUser


class TestDemoContext:
    def test_off_by_default(self) -> None:
        assert not DemoContext().enabled

    def test_enable_and_disable(self) -> None:
        demo = DemoContext()
        demo.enable()
        assert demo.enabled
        assert demo.user.id == "demo-user-123"
        assert demo.user.handle == "@alexdemo"

        demo.credit(50)
        demo.disable()
        assert not demo.enabled
        assert demo.user.points == 1250

    def test_custom_user(self) -> None:
        demo = DemoContext()
        demo.enable(DemoUser(handle="@sam", points=10))
        assert demo.credit(5) == 15

    def test_credit_ignores_negative(self) -> None:
        demo = DemoContext()
        assert demo.credit(-20) == 1250
