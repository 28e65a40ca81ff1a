"""DynamoDB regions and their endpoints."""

import httpx
from pydantic import BaseModel, ConfigDict

from dynamowire.exceptions import UnknownRegionError


class Region(BaseModel):
    """A region name bound to the endpoint that serves it.

    Attributes:
        name: The region name used in request signatures, e.g. "us-east-1".
        endpoint: Host (and optional port) of the DynamoDB endpoint.
        scheme: "https" for AWS, "http" is allowed for local endpoints.

    """

    model_config = ConfigDict(frozen=True)

    name: str
    endpoint: str
    scheme: str = "https"

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.endpoint}"

    @classmethod
    def custom(cls, name: str, endpoint_url: str) -> "Region":
        """Region for a non-standard endpoint such as DynamoDB Local.

        Example:
            Region.custom("us-east-1", "http://localhost:8000")

        """
        url = httpx.URL(endpoint_url)
        return cls(name=name, endpoint=url.netloc.decode("ascii"), scheme=url.scheme)


US_EAST_1 = Region(name="us-east-1", endpoint="dynamodb.us-east-1.amazonaws.com")
US_WEST_1 = Region(name="us-west-1", endpoint="dynamodb.us-west-1.amazonaws.com")
US_WEST_2 = Region(name="us-west-2", endpoint="dynamodb.us-west-2.amazonaws.com")
EU_WEST_1 = Region(name="eu-west-1", endpoint="dynamodb.eu-west-1.amazonaws.com")
AP_NORTHEAST_1 = Region(name="ap-northeast-1", endpoint="dynamodb.ap-northeast-1.amazonaws.com")
AP_SOUTHEAST_1 = Region(name="ap-southeast-1", endpoint="dynamodb.ap-southeast-1.amazonaws.com")

REGIONS: dict[str, Region] = {
    region.name: region
    for region in (US_EAST_1, US_WEST_1, US_WEST_2, EU_WEST_1, AP_NORTHEAST_1, AP_SOUTHEAST_1)
}


def get_region(name: str) -> Region:
    """Look up a region by name.

    Raises:
        UnknownRegionError: If the name is not in REGIONS.

    """
    try:
        return REGIONS[name]
    except KeyError:
        raise UnknownRegionError(name) from None


__all__ = [
    "AP_NORTHEAST_1",
    "AP_SOUTHEAST_1",
    "EU_WEST_1",
    "REGIONS",
    "US_EAST_1",
    "US_WEST_1",
    "US_WEST_2",
    "Region",
    "get_region",
]
