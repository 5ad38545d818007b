#!/usr/bin/env python3
"""
Watchful Example CDK Application Entry Point
"""
import logging
import os
import aws_cdk as cdk

from watchful.app_stack import WatchfulExampleStack


# Users can override account/region via the standard CDK environment variables
environment_config = cdk.Environment(
    account=os.getenv('CDK_DEFAULT_ACCOUNT'),
    region=os.getenv('CDK_DEFAULT_REGION', 'us-east-1')
)

def main():
    """Main application entry point"""
    logging.basicConfig(level=os.getenv('WATCHFUL_LOG_LEVEL', 'INFO'))

    app = cdk.App()

    WatchfulExampleStack(
        app,
        "WatchfulExample",
        alarm_email=os.getenv('WATCHFUL_ALARM_EMAIL'),
        env=environment_config,
        description="Example stack watched by Watchful"
    )

    app.synth()


if __name__ == "__main__":
    main()
