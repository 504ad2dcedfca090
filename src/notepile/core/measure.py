"""Height measurement protocol between a note's surface and the host.

The script injected after load reports the rendered height of the root
element as ``HEIGHT:<number>`` on the surface's one-way channel
(``console.info``). It reports again whenever the DOM under the root changes
or an image finishes loading, at most once per animation frame. The host
treats every report as a candidate; the debounced layout applier decides
which one sticks.
"""

import logging
import math
import re
from typing import Callable

from .document import ROOT_ELEMENT_ID
from .ports import RenderSurface, Scheduler

logger = logging.getLogger(__name__)

HEIGHT_PREFIX = "HEIGHT:"
MEASURE_FUNCTION = "notepileMeasure"

_PAYLOAD_RE = re.compile(r"^HEIGHT:(\d+(?:\.\d+)?)$")

MEASURE_SCRIPT = (
    "(function(){"
    "var scheduled = false;"
    "function emit(h){ try{ console.info('" + HEIGHT_PREFIX + "' + h); }catch(e){} }"
    "function measure(){"
    "scheduled = false;"
    "var el = document.getElementById('" + ROOT_ELEMENT_ID + "');"
    "if(!el){ emit(document.body.scrollHeight || document.documentElement.scrollHeight || 0); return; }"
    "var prevOverflow = '';"
    "try{ prevOverflow = document.body.style.overflow || ''; document.body.style.overflow = 'hidden'; }catch(e){}"
    "var h = el.scrollHeight || (el.getBoundingClientRect && el.getBoundingClientRect().height) || document.body.scrollHeight || 0;"
    "try{ document.body.style.overflow = prevOverflow; }catch(e){}"
    "emit(h);"
    "}"
    "function scheduleMeasure(){"
    "if(scheduled) return;"
    "scheduled = true;"
    "requestAnimationFrame(measure);"
    "}"
    "window." + MEASURE_FUNCTION + " = scheduleMeasure;"
    "var obs = new MutationObserver(scheduleMeasure);"
    "try{ obs.observe(document.getElementById('" + ROOT_ELEMENT_ID + "') || document.body,"
    " {subtree:true, childList:true, attributes:true}); }catch(e){}"
    "Array.prototype.forEach.call(document.images || [], function(i){"
    " if(!i.complete){ i.addEventListener('load', scheduleMeasure); i.addEventListener('error', scheduleMeasure); } });"
    "scheduleMeasure();"
    "})();"
    # completion value; runJavaScript hands it back only if the IIFE did not throw
    "true"
)

REMEASURE_SCRIPT = f"if (window.{MEASURE_FUNCTION}) window.{MEASURE_FUNCTION}();"

HEIGHT_QUERY_SCRIPT = (
    "Math.max("
    "document.documentElement ? document.documentElement.scrollHeight : 0,"
    " document.body ? document.body.scrollHeight : 0,"
    " document.body ? document.body.getBoundingClientRect().height : 0)"
)


def format_height_payload(height: float) -> str:
    return f"{HEIGHT_PREFIX}{height:g}"


def parse_height_payload(payload: object) -> float | None:
    """Return the height carried by a ``HEIGHT:<n>`` payload, else None."""
    if not isinstance(payload, str):
        return None
    m = _PAYLOAD_RE.match(payload.strip())
    if not m:
        return None
    value = float(m.group(1))
    if not math.isfinite(value):
        return None
    return value


def query_result_to_payload(result: object) -> str | None:
    """Turn a direct height query result into a channel payload."""
    if isinstance(result, bool):
        return None
    if isinstance(result, (int, float)):
        height = float(result)
    elif isinstance(result, str):
        try:
            height = float(result)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(height) or height < 0:
        return None
    return format_height_payload(height)


def poll_heights(
    surface: RenderSurface,
    emit: Callable[[str], None],
    scheduler: Scheduler,
    delay_ms: int,
    alive: Callable[[], bool] = lambda: True,
) -> None:
    """
    Fallback when the measurement script cannot be injected: one query now
    and one after ``delay_ms``, each fed through ``emit`` like a script
    report. Yields at most two layout applications.
    """

    def query() -> None:
        if not alive():
            return
        surface.evaluate(HEIGHT_QUERY_SCRIPT, on_result)

    def on_result(result: object) -> None:
        payload = query_result_to_payload(result)
        if payload is None:
            logger.debug("height query returned unusable result %r", result)
            return
        emit(payload)

    query()
    scheduler.call_later(delay_ms, query)
