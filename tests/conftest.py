import pytest
import awsops
from fakes import FakeConfig

@pytest.fixture
def no_version_check(monkeypatch):
    monkeypatch.setattr('awsops.version.check', lambda *a, **kw: None)

@pytest.fixture
def fake_config(monkeypatch, no_version_check):
    def install(**clients):
        if 'lamda' in clients:
            clients['lambda'] = clients.pop('lamda')
        config = FakeConfig({('default', name): factory for name, factory in clients.items()})
        monkeypatch.setattr(awsops, 'Config', lambda region=None, profile=None: config)
        return config
    return install
