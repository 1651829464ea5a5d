from concurrent.futures import ThreadPoolExecutor
from typing import List, NamedTuple, Optional
import datetime
import logging
import math
import re
import awsops
import awsops.format

page_size = 50

lookback = datetime.timedelta(days=30)

inactive_sentinel = 'inactive for 30 days'

one_hour = 60 * 60

thirty_days = 30 * 24 * one_hour

request_price = 0.0000002 # per invocation

compute_price = 0.000000208 # per 100ms at 128MB

class FunctionRecord(NamedTuple):
    region: str
    name: str
    runtime: Optional[str]
    memory_size: int
    code_size: int
    last_modified: str
    last_used: str

class FunctionCost(NamedTuple):
    region: str
    name: str
    runtime: Optional[str]
    memory_size: int
    invocations: float
    duration_ms: float
    cost: float

    @property
    def cost_per_invocation(self):
        return self.cost / self.invocations if self.invocations else 0

class MetricQuery(NamedTuple):
    id: str
    label: str
    dimension: str
    statistic: str
    period: int
    metric: str = 'Invocations'

    def render(self):
        return {'Id': self.id,
                'Label': self.label,
                'MetricStat': {'Metric': {'Namespace': 'AWS/Lambda',
                                          'MetricName': self.metric,
                                          'Dimensions': [{'Name': 'FunctionName', 'Value': self.dimension}]},
                               'Period': self.period,
                               'Stat': self.statistic},
                'ReturnData': True}

def query_id(index, name):
    # ids must be unique and start with a lowercase letter
    return f'q{index}_' + re.sub(r'\W', '', name.lower())

def get_metric_data(cloudwatch, queries, period_end=None):
    end = period_end or awsops.now()
    resp = cloudwatch.get_metric_data(StartTime=end - lookback,
                                      EndTime=end,
                                      ScanBy='TimestampDescending',
                                      MetricDataQueries=[q.render() for q in queries])
    return {result['Label']: result for result in resp['MetricDataResults']}

def last_used(timestamps, now=None):
    if not timestamps:
        return inactive_sentinel
    return awsops.format.ago(max(timestamps), now)

def last_invocations(cloudwatch, names, now=None):
    queries = [MetricQuery(query_id(i, name), name, name, 'Sum', one_hour) for i, name in enumerate(names)]
    results = get_metric_data(cloudwatch, queries, now)
    return {name: last_used(results.get(name, {}).get('Timestamps'), now) for name in names}

def pages(lamda):
    for page in lamda.get_paginator('list_functions').paginate(PaginationConfig={'PageSize': page_size}):
        yield page.get('Functions', [])

def ls_functions_in_region(config, region, inactive=False, now=None) -> List[FunctionRecord]:
    lamda = config.client('lambda', region)
    cloudwatch = config.client('cloudwatch', region)
    functions: List[FunctionRecord] = []
    for page in pages(lamda):
        if not page:
            continue
        used = last_invocations(cloudwatch, [f['FunctionName'] for f in page], now)
        for f in page:
            record = FunctionRecord(region=region,
                                    name=f['FunctionName'],
                                    runtime=f.get('Runtime'),
                                    memory_size=f['MemorySize'],
                                    code_size=f['CodeSize'],
                                    last_modified=f['LastModified'],
                                    last_used=used[f['FunctionName']])
            if not inactive or record.last_used.startswith(inactive_sentinel):
                functions.append(record)
    logging.debug(f'{region}: {len(functions)} functions')
    return functions

def fan_out(fn, regions):
    # results come back in region order, the first failure re-raises here
    with ThreadPoolExecutor(max_workers=max(1, len(regions))) as pool:
        return [x for xs in pool.map(fn, regions) for x in xs]

def ls_functions(config, regions, inactive=False, now=None) -> List[FunctionRecord]:
    return fan_out(lambda region: ls_functions_in_region(config, region, inactive, now), regions)

def estimate(memory_size, invocations, duration_ms):
    if not invocations:
        return 0
    billed_units = math.ceil(round(duration_ms / invocations, 6) / 100)
    compute = compute_price * memory_size / 128 * billed_units
    return invocations * (compute + request_price)

def invocation_stats(cloudwatch, names, now=None):
    queries = []
    for i, name in enumerate(names):
        queries.append(MetricQuery(query_id(i, name) + '_count', f'{name}InvocationCount', name, 'Sum', thirty_days, 'Invocations'))
        queries.append(MetricQuery(query_id(i, name) + '_duration', f'{name}Duration', name, 'Sum', thirty_days, 'Duration'))
    results = get_metric_data(cloudwatch, queries, now)
    stats = {}
    for name in names:
        count = sum(results.get(f'{name}InvocationCount', {}).get('Values') or [])
        duration = sum(results.get(f'{name}Duration', {}).get('Values') or [])
        stats[name] = count, duration
    return stats

def costs_in_region(config, region, now=None) -> List[FunctionCost]:
    lamda = config.client('lambda', region)
    cloudwatch = config.client('cloudwatch', region)
    functions: List[FunctionCost] = []
    for page in pages(lamda):
        if not page:
            continue
        stats = invocation_stats(cloudwatch, [f['FunctionName'] for f in page], now)
        for f in page:
            invocations, duration = stats[f['FunctionName']]
            functions.append(FunctionCost(region=region,
                                          name=f['FunctionName'],
                                          runtime=f.get('Runtime'),
                                          memory_size=f['MemorySize'],
                                          invocations=invocations,
                                          duration_ms=duration,
                                          cost=estimate(f['MemorySize'], invocations, duration)))
    return functions

def costs(config, regions, now=None) -> List[FunctionCost]:
    functions = fan_out(lambda region: costs_in_region(config, region, now), regions)
    return sorted(functions, key=lambda f: f.cost, reverse=True)

def show_functions(functions, now=None):
    rows = [[f.region,
             awsops.format.truncate(f.name, 50),
             f.runtime,
             f.memory_size,
             awsops.format.filesize(f.code_size),
             awsops.format.ago(f.last_modified, now),
             f.last_used]
            for f in functions]
    print(awsops.format.table(['region', 'name', 'runtime', 'memory', 'code size', 'last modified', 'last used'], rows))

def show_costs(functions):
    rows = [[f.region,
             awsops.format.truncate(f.name, 50),
             f.runtime,
             f.memory_size,
             int(f.invocations),
             awsops.format.cost(f.cost_per_invocation),
             awsops.format.cost(f.cost)]
            for f in functions]
    print(awsops.format.table(['region', 'name', 'runtime', 'memory', 'invocations', 'cost per invocation', 'total cost'], rows))
