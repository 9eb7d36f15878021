"""
Lambda@Edge origin-request relay for the book Function URLs.

CloudFront routes /getBook/*, /getBooks, /createBook, /updateBook/* and
/deleteBook/* to five Lambda Function URLs protected by AWS_IAM auth. This
function runs on each origin request and:
1. Removes x-forwarded-for (not part of what the origin should see or sign)
2. Strips the behaviour segment from the uri (/updateBook/1234 -> /1234)
3. Signs the request with SigV4 for the "lambda" service using this edge
   function's own credentials, in the region encoded in the origin host
4. Writes the signed headers back in CloudFront's header format

The edge function role needs lambda:InvokeFunctionUrl on the target URLs.
Lambda@Edge has no environment variables; everything comes from the event.
"""

import base64
import json
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

SIGNING_SERVICE = "lambda"


class UnexpectedOriginError(Exception):
    """Raised when the request is not routed to a custom (HTTP) origin."""
    pass


def strip_behavior_path(uri: str) -> str:
    """
    Remove the first path segment, which names the CloudFront behaviour.

    Examples:
        /updateBook/1234 -> /1234
        /getBooks -> /
    """
    segments = uri[1:].split("/")
    return "/" + "/".join(segments[1:])


def region_from_host(host: str) -> str:
    """Return the region of a Function URL host (<id>.lambda-url.<region>.on.aws)."""
    return host.split(".")[2]


def decode_body(body: Optional[Dict[str, Any]]) -> Optional[bytes]:
    """Decode the CloudFront body (only present when the behaviour includes it)."""
    if not body or not body.get("data"):
        return None
    if body.get("encoding") == "base64":
        return base64.b64decode(body["data"])
    return body["data"].encode("utf-8")


def sign_request(request: Dict[str, Any], credentials: Any) -> Dict[str, Any]:
    """
    Rewrite and sign a CloudFront origin request in place.

    Args:
        request: CloudFront request (event["Records"][0]["cf"]["request"])
        credentials: botocore credentials used for SigV4

    Returns:
        The same request with uri rewritten and signature headers added

    Raises:
        UnexpectedOriginError: If the origin is not a custom origin
    """
    headers = request["headers"]

    # remove the x-forwarded-for from the signature
    headers.pop("x-forwarded-for", None)

    if "custom" not in request.get("origin", {}):
        raise UnexpectedOriginError(
            f"Unexpected origin type. Expected 'custom'. Got: {json.dumps(request.get('origin'))}"
        )

    uri = strip_behavior_path(request["uri"])
    request["uri"] = uri

    host = headers["host"][0]["value"]
    region = region_from_host(host)
    querystring = request.get("querystring")
    path = uri + (f"?{querystring}" if querystring else "")

    aws_request = AWSRequest(
        method=request["method"],
        url=f"https://{host}{path}",
        data=decode_body(request.get("body")),
        headers={values[0]["key"]: values[0]["value"] for values in headers.values()},
    )
    SigV4Auth(credentials, SIGNING_SERVICE, region).add_auth(aws_request)

    # reformat the headers for CloudFront
    for name, value in aws_request.headers.items():
        headers[name.lower()] = [{"key": name, "value": str(value)}]

    return request


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda@Edge origin-request handler.

    Args:
        event: CloudFront event
        context: Lambda context

    Returns:
        The signed request for CloudFront to forward
    """
    logger.info(f"Event: {json.dumps(event)}")

    request = event["Records"][0]["cf"]["request"]
    credentials = boto3.Session().get_credentials()
    signed_request = sign_request(request, credentials)

    logger.info(f"Forwarding {signed_request['method']} {signed_request['uri']}")
    return signed_request
