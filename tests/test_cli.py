import threading
import botocore.exceptions
import argh
import pytest
import awsops
import awsops.cli
import awsops.sqs
import awsops.keypress
from fakes import FakeLambda, FakeCloudWatch, FakeSqs

def test_lists_one_region(fake_config, capsys):
    config = fake_config(lamda=lambda: FakeLambda(pages=[(['function-a'], None)]), cloudwatch=FakeCloudWatch)
    awsops.cli.list_functions(region='us-east-1')
    out = capsys.readouterr().out
    assert 'function-a' in out
    assert 'inactive for 30 days' in out
    assert len(config.calls('lambda')) == 1

def test_lists_all_regions(fake_config, capsys):
    config = fake_config(lamda=lambda: FakeLambda(always=['function-a']), cloudwatch=FakeCloudWatch)
    awsops.cli.list_functions()
    out = capsys.readouterr().out
    assert out.count('function-a') == 16
    assert len(config.calls('lambda')) == 16

def test_lists_every_page(fake_config, capsys):
    config = fake_config(lamda=lambda: FakeLambda(pages=[(['function-a'], 'more'), (['function-b'], None)]), cloudwatch=FakeCloudWatch)
    argh.dispatch_commands(awsops.cli.commands, argv=['list-functions', '-r', 'us-east-1', '--inactive'])
    out = capsys.readouterr().out
    assert 'function-a' in out
    assert 'function-b' in out
    assert len(config.calls('lambda')) == 2

def test_analyzes_cost(fake_config, capsys):
    values = {'functionInvocationCount': [1000000], 'functionDuration': [100000000]}
    fake_config(lamda=lambda: FakeLambda(pages=[(['function'], None)]), cloudwatch=lambda: FakeCloudWatch(values=values))
    awsops.cli.analyze_lambda_cost(region='us-east-1')
    out = capsys.readouterr().out
    assert 'function' in out
    assert '128' in out
    assert '1000000' in out
    assert '0.0000004080' in out
    assert '0.4080000000' in out

def test_analyzes_cost_without_metrics(fake_config, capsys):
    config = fake_config(lamda=lambda: FakeLambda(pages=[(['function-a'], None)]), cloudwatch=FakeCloudWatch)
    awsops.cli.analyze_lambda_cost(region='us-east-1')
    row = [line for line in capsys.readouterr().out.splitlines() if 'function-a' in line][0]
    assert row.split()[-3:] == ['0', '-', '-']
    assert len(config.calls('lambda')) == 1

def test_missing_queue_exits_non_zero(fake_config, capsys):
    fake_config(sqs=FakeSqs)
    with pytest.raises(SystemExit) as e:
        awsops.cli.tail_queue(queue_name='missing', region='us-east-1')
    assert e.value.code == 1
    assert 'cannot find the SQS queue [missing]!' in capsys.readouterr().err

def test_tails_queue_until_stopped(fake_config, monkeypatch, capsys):
    stop = threading.Event()
    url = 'https://sqs.us-east-1.amazonaws.com/123456789012/orders'
    fake_config(sqs=lambda: FakeSqs(responses=[{'Messages': [{'MessageId': '1', 'Body': 'on the wire'}]}], queues=[url], stop=stop))
    monkeypatch.setattr(awsops.keypress, 'on_keypress', lambda: stop)
    argh.dispatch_commands(awsops.cli.commands, argv=['tail-queue', '-n', 'orders', '-r', 'us-east-1'])
    assert 'on the wire' in capsys.readouterr().out

def test_upstream_failures_exit_non_zero(fake_config):
    error = botocore.exceptions.ClientError({'Error': {'Code': 'AccessDenied', 'Message': 'nope'}}, 'ListFunctions')
    fake_config(lamda=lambda: FakeLambda(error=error), cloudwatch=FakeCloudWatch)
    with pytest.raises(SystemExit) as e:
        awsops.cli.list_functions(region='us-east-1')
    assert e.value.code == 1

def test_tail_commands_require_name_and_region(no_version_check):
    for argv in [['tail-queue', '-r', 'us-east-1'], ['tail-queue', '-n', 'orders'], ['tail-topic', '-r', 'us-east-1']]:
        with pytest.raises(SystemExit) as e:
            argh.dispatch_commands(awsops.cli.commands, argv=argv)
        assert e.value.code == 2

def test_ctrl_c_stops_a_tail_cleanly(fake_config, monkeypatch):
    fake_config(sqs=FakeSqs)

    def interrupted(config, queue_name):
        raise KeyboardInterrupt

    monkeypatch.setattr(awsops.sqs, 'main', interrupted)
    awsops.cli.tail_queue(queue_name='orders', region='us-east-1')
