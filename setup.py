import setuptools

setuptools.setup(
    version="0.0.1",
    license='mit',
    name='cli-aws-ops',
    packages=['awsops'],
    python_requires='>=3.8',
    install_requires=['requests >2, <3',
                      'boto3 >1, <2',
                      'argh >=0.30, <1',
                      'flask >2, <4',
                      'werkzeug >2, <4',
                      'tabulate >0.8, <1',
                      'rich >10, <15'],
    extras_require={'test': ['pytest >=7']},
    entry_points={'console_scripts': ['cli-aws-ops = awsops.cli:main']},
    description='list lambda functions and tail sns topics and sqs queues',
)
