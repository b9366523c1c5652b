"""Shared test helpers and sample dump output."""

from __future__ import annotations

from dumpviewer.models import Dump

INDENTED_SAMPLE = """App\\Models\\User {#1234
  #attributes: array:2 [
    "id" => 1
    "name" => "Taylor"
  ]
  +exists: true
}"""

WIDGET_SAMPLE = (
    '<pre class="sf-dump" id="sf-dump-1" data-indent-pad="  ">'
    '<span class="sf-dump-note">array:2</span> ['
    '<samp data-depth=1 class="sf-dump-expanded">'
    '<span class="sf-dump-key">a</span> => '
    '<a class="sf-dump-ref sf-dump-toggle" title="[Ctrl+click] Expand all children">'
    "<span>&#9654;</span></a>"
    '<samp data-depth=2 class="sf-dump-compact">1</samp>'
    "</samp>]</pre>"
    '<script>Sfdump("sf-dump-1")</script>'
)


class FakeClock:
    """Manually advanced clock for cool-down tests."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_dump(output: object, timestamp: str = "2024-05-01T10:00:00", **kwargs: object) -> Dump:
    return Dump(timestamp=timestamp, output=output, **kwargs)
