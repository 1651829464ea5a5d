from typing import NamedTuple
from werkzeug.serving import make_server
import urllib.parse
import threading
import requests
import logging
import socket
import flask
import json
import awsops
import awsops.keypress

class Subscription(NamedTuple):
    topic_arn: str
    subscription_arn: str
    endpoint_url: str

def topic_arn(sns, name):
    for page in sns.get_paginator('list_topics').paginate():
        for topic in page.get('Topics', []):
            if topic['TopicArn'].endswith(':' + name):
                return topic['TopicArn']
    raise awsops.NotFound(f'cannot find the SNS topic [{name}]!')

def show(message):
    print(awsops.grey(awsops.timestamp()), '\n', message['Message'], flush=True)

def webhook(arn, print_fn=show):
    app = flask.Flask(__name__)

    @app.route('/', methods=['POST'])
    def receive():
        kind = flask.request.headers.get('x-amz-sns-message-type')
        # sns posts json with a text/plain content type
        message = json.loads(flask.request.get_data(as_text=True) or '{}')
        if message.get('TopicArn') != arn:
            logging.debug(f'ignoring sns message from another topic: {message.get("TopicArn")}')
        elif kind == 'SubscriptionConfirmation':
            requests.get(message['SubscribeURL'], timeout=10).raise_for_status()
            logging.info('subscription confirmed')
        elif kind == 'Notification':
            print_fn(message)
        else:
            logging.debug(f'ignoring sns message type: {kind}')
        return ''

    return app

class Server:
    def __init__(self, app, host='0.0.0.0', port=0):
        self.server = make_server(host, port, app, threaded=True)
        self.port = self.server.server_port
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)

    def start(self):
        self.thread.start()
        return self

    def stop(self):
        self.server.shutdown()
        self.thread.join()

def endpoint_url(endpoint, port):
    if endpoint:
        return endpoint
    return f'http://{socket.gethostname()}:{port}/'

def subscribe(sns, arn, url):
    protocol = urllib.parse.urlparse(url).scheme
    assert protocol in {'http', 'https'}, f'endpoint must be an http or https url: {url}'
    resp = sns.subscribe(TopicArn=arn, Protocol=protocol, Endpoint=url, ReturnSubscriptionArn=True)
    logging.info('subscribed to SNS')
    return Subscription(arn, resp['SubscriptionArn'], url)

def unsubscribe(sns, subscription):
    try:
        sns.unsubscribe(SubscriptionArn=subscription.subscription_arn)
    except Exception:
        logging.exception(f'failed to unsubscribe: {subscription.subscription_arn}')
    else:
        logging.info('unsubscribed from SNS')

def tail(sns, arn, stop, endpoint=None, port=0, print_fn=show):
    server = Server(webhook(arn, print_fn), port=port).start()
    subscription = None
    try:
        logging.info(f'polling SNS topic [{arn}]...')
        subscription = subscribe(sns, arn, endpoint_url(endpoint, server.port))
        stop.wait()
    finally:
        server.stop()
        if subscription:
            unsubscribe(sns, subscription)

def main(config, topic_name, endpoint=None, port=0, stop=None):
    logging.info(f'finding the topic [{topic_name}] in [{config.region}]')
    sns = config.client('sns')
    arn = topic_arn(sns, topic_name)
    tail(sns, arn, stop or awsops.keypress.on_keypress(), endpoint, port)
