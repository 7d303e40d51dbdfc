from __future__ import annotations

import aiohttp.typedefs

HttpURL = aiohttp.typedefs.URL
HttpStrOrURL = aiohttp.typedefs.StrOrURL
