import boto3
import botocore.exceptions
import datetime
import contextlib
import traceback
import threading
import logging
import os
import sys
from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style

stderr = lambda *a: print(*a, file=sys.stderr)

def _color(style):
    style = Style.parse(style)
    return lambda text: style.render(str(text))

red = _color('red')
cyan = _color('cyan')
grey = _color('bold grey30 on white')

class NotFound(Exception):
    pass

class Config:
    def __init__(self, region=None, profile=None):
        self.region = region or os.environ.get('region') or os.environ.get('REGION')
        self.profile = profile
        self.session = boto3.session.Session(profile_name=profile, region_name=self.region)
        self._clients = {}
        self._lock = threading.Lock()

    def client(self, name, region=None):
        key = name, region or self.region
        with self._lock: # sessions are not thread safe, clients are
            if key not in self._clients:
                self._clients[key] = self.session.client(name, region_name=key[1])
            return self._clients[key]

def now():
    return datetime.datetime.now(datetime.timezone.utc)

def timestamp():
    return now().isoformat().replace('+00:00', 'Z')

@contextlib.contextmanager
def setup():
    logging.basicConfig(level='INFO', format='%(message)s', handlers=[RichHandler(show_time=False, show_level=False, show_path=False, console=Console(stderr=True))])
    logging.getLogger('botocore').setLevel('ERROR')
    logging.getLogger('werkzeug').setLevel('ERROR')
    try:
        yield
    except (AssertionError, NotFound) as e:
        stderr(red('error: %s' % (e.args[0] if e.args else traceback.format_exc().splitlines()[-2].strip())))
        sys.exit(1)
    except (botocore.exceptions.ClientError, botocore.exceptions.BotoCoreError) as e:
        stderr(red(f'error: {e}'))
        sys.exit(1)
    except KeyboardInterrupt:
        pass # ctrl-c stops a tail, exit 0

regions = [
    'us-east-1',
    'us-east-2',
    'us-west-1',
    'us-west-2',
    'ap-south-1',
    'ap-northeast-1',
    'ap-northeast-2',
    'ap-southeast-1',
    'ap-southeast-2',
    'ca-central-1',
    'eu-central-1',
    'eu-west-1',
    'eu-west-2',
    'eu-west-3',
    'eu-north-1',
    'sa-east-1',
]
