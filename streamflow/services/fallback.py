"""
Built-in catalog used when the iptv-org data can't be retrieved or yields nothing.
"""
from streamflow.models.channel import Category, Channel

FALLBACK_CHANNELS: tuple[Channel, ...] = (
    Channel(
        id="nasa",
        name="NASA TV",
        logo="https://upload.wikimedia.org/wikipedia/commons/thumb/e/e5/NASA_logo.svg/200px-NASA_logo.svg.png",
        category=Category.NEWS,
        url="https://ntv1.akamaized.net/hls/live/2014075/NASA-NTV1-HLS/master.m3u8",
        input_type="m3u8",
        description="Official stream of NASA.",
        country="US",
        country_name="United States",
        region="North America",
    ),
)

ADVISORY_NETWORK_ERROR = "Network error."
ADVISORY_OFFLINE_BACKUP = "Using offline backup."
