import collections
import logging
import awsops
import awsops.keypress

capacity = 1000

class SeenMessageWindow:
    """
    The most recent message ids, oldest evicted first. Redelivered messages
    are only recognized while their id is still in the window.
    """

    def __init__(self, capacity=capacity):
        assert capacity > 0, f'window capacity must be positive: {capacity}'
        self.capacity = capacity
        self._order = collections.deque()
        self._ids = set()

    def add(self, message_id):
        if message_id in self._ids:
            return False
        if len(self._order) >= self.capacity:
            self._ids.discard(self._order.popleft())
        self._order.append(message_id)
        self._ids.add(message_id)
        return True

    def clear(self):
        self._order.clear()
        self._ids.clear()

    def __contains__(self, message_id):
        return message_id in self._ids

    def __len__(self):
        return len(self._order)

    def __iter__(self):
        return iter(list(self._order))

def queue_url(sqs, name):
    for page in sqs.get_paginator('list_queues').paginate(QueueNamePrefix=name, PaginationConfig={'PageSize': 1000}):
        for url in page.get('QueueUrls', []):
            if url.endswith('/' + name):
                return url
    raise awsops.NotFound(f'cannot find the SQS queue [{name}]!')

def show(body):
    print(awsops.grey(awsops.timestamp()), '\n', body, flush=True)

def tail(sqs, url, stop, window=None, print_fn=show):
    window = SeenMessageWindow() if window is None else window
    try:
        while not stop.is_set():
            resp = sqs.receive_message(QueueUrl=url, MaxNumberOfMessages=10, WaitTimeSeconds=5)
            for message in resp.get('Messages', []):
                if window.add(message['MessageId']):
                    print_fn(message['Body'])
    finally:
        window.clear()
        logging.info('stopped')

def main(config, queue_name, stop=None):
    logging.info(f'finding the queue [{queue_name}] in [{config.region}]')
    sqs = config.client('sqs')
    url = queue_url(sqs, queue_name)
    logging.info(f'polling SQS queue [{url}]...')
    tail(sqs, url, stop or awsops.keypress.on_keypress())
