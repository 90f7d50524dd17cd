"""
Deployment entry for the storefront products and orders API.

The function is packaged with ``src/`` as its code root; ``storefront`` lives
one directory up from this module.
"""

import os
import sys
from typing import Any, Dict

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from aws_lambda_powertools.utilities.typing import LambdaContext
from storefront.handlers.api_handler import lambda_handler as api_handler


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """Hand an API Gateway REST proxy event to the storefront dispatcher."""
    return api_handler(event, context)
