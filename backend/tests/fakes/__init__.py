from tests.fakes.profile_repository import FakeClock, FakeProfileRepository

__all__ = ["FakeClock", "FakeProfileRepository"]
