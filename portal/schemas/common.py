from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from portal.core.clock import as_utc

# Inbound timestamps: offsets are converted to UTC, naive values are read as UTC.
UTCDatetime = Annotated[datetime, AfterValidator(as_utc)]
