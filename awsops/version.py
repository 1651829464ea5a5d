import importlib.metadata
import requests
import os
import awsops

name = 'cli-aws-ops'

banner = '''
  ===============================================================
       v{latest} of this cli is now available on pypi.
         please run "pip install -U {name}" to update
  ===============================================================
'''

def parse(version):
    return tuple(int(x) if x.isdigit() else 0 for x in version.split('.'))

def latest(name=name, timeout=2):
    resp = requests.get(f'https://pypi.org/pypi/{name}/json', timeout=timeout)
    resp.raise_for_status()
    return resp.json()['info']['version']

def check(name=name):
    if os.environ.get('AWSOPS_NO_VERSION_CHECK'):
        return
    try:
        current = importlib.metadata.version(name)
        newest = latest(name)
        if parse(newest) > parse(current):
            awsops.stderr(awsops.cyan(banner.format(latest=newest, name=name)))
    except Exception: # best effort
        pass
