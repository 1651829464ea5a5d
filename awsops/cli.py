import argh
import awsops
import awsops.lamda
import awsops.sns
import awsops.sqs
import awsops.version

@argh.arg('-i', '--inactive', help='only include functions that are inactive for 30 days')
@argh.arg('-r', '--region', help='only include functions in an AWS region, e.g. us-east-1')
@argh.arg('-p', '--profile', help='AWS CLI profile name')
def list_functions(*, inactive=False, region=None, profile=None):
    """list lambda functions in all regions"""
    with awsops.setup():
        config = awsops.Config(region, profile)
        awsops.version.check()
        functions = awsops.lamda.ls_functions(config, [region] if region else awsops.regions, inactive)
        awsops.lamda.show_functions(functions)

@argh.arg('-r', '--region', help='only include functions in an AWS region, e.g. us-east-1')
@argh.arg('-p', '--profile', help='AWS CLI profile name')
def analyze_lambda_cost(*, region=None, profile=None):
    """estimate the cost of lambda functions over the last 30 days"""
    with awsops.setup():
        config = awsops.Config(region, profile)
        awsops.version.check()
        functions = awsops.lamda.costs(config, [region] if region else awsops.regions)
        awsops.lamda.show_costs(functions)

@argh.arg('-n', '--topic-name', required=True, help='name of the SNS topic, e.g. task-topic-dev')
@argh.arg('-r', '--region', required=True, help='AWS region, e.g. us-east-1')
@argh.arg('-p', '--profile', help='AWS CLI profile name')
@argh.arg('-e', '--endpoint', help='public url forwarding to the local listener, e.g. an https tunnel')
@argh.arg('--port', type=int, help='local listener port, ephemeral by default')
def tail_topic(*, topic_name=None, region=None, profile=None, endpoint=None, port=0):
    """tail the messages going into a SNS topic"""
    with awsops.setup():
        config = awsops.Config(region, profile)
        awsops.version.check()
        awsops.sns.main(config, topic_name, endpoint, port)

@argh.arg('-n', '--queue-name', required=True, help='name of the SQS queue, e.g. task-queue-dev')
@argh.arg('-r', '--region', required=True, help='AWS region, e.g. us-east-1')
@argh.arg('-p', '--profile', help='AWS CLI profile name')
def tail_queue(*, queue_name=None, region=None, profile=None):
    """tail the messages going into a SQS queue"""
    with awsops.setup():
        config = awsops.Config(region, profile)
        awsops.version.check()
        awsops.sqs.main(config, queue_name)

commands = [
    list_functions,
    analyze_lambda_cost,
    tail_topic,
    tail_queue,
]

def main():
    argh.dispatch_commands(commands)

if __name__ == '__main__':
    main()
