"""Resource paths of the metadata field registry"""
from typing import Optional, Sequence
from urllib.parse import quote, urlencode

METADATA_FIELDS = "metadata_fields"
DATASOURCE = "datasource"
ENTRY_IDS_PARAM = "external_ids[]"


class MetadataUrlBuilder:
    """Builds ``{base}/metadata_fields[/{external_id}[/datasource]]``"""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def fields(self) -> str:
        return f"{self.base_url}/{METADATA_FIELDS}"

    def field(self, external_id: str) -> str:
        return f"{self.fields()}/{quote(external_id, safe='')}"

    def datasource(self, external_id: str, entry_ids: Optional[Sequence[str]] = None) -> str:
        """Datasource path; ``entry_ids`` are appended as repeated ``external_ids[]`` query parameters"""
        url = f"{self.field(external_id)}/{DATASOURCE}"
        if entry_ids:
            url = f"{url}?{urlencode([(ENTRY_IDS_PARAM, entry_id) for entry_id in entry_ids])}"
        return url
