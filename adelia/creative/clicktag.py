"""
Click-macro relay.

An outer ad server hands the creative a redirect prefix through the
``clickTag`` query parameter. The landing address is the prefix followed by
the URI-encoded target, or the bare target when no prefix was supplied.
The same rule runs in the browser (``RUNTIME_JS``) and here, where the build
and the tests use it.
"""

from __future__ import annotations

from urllib.parse import parse_qs, quote

from adelia.common.config import get_settings

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode like JavaScript's ``encodeURIComponent``."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def resolve_landing(prefix: str | None, target_url: str) -> str:
    """Landing address for a click on the creative's hot-zone."""
    if not prefix:
        return target_url
    return prefix + encode_uri_component(target_url)


def read_click_prefix(query_string: str, param: str | None = None) -> str:
    """Redirect prefix carried in a creative's own query string."""
    param = param or get_settings().embed.click_param
    values = parse_qs(query_string.lstrip("?"), keep_blank_values=True).get(param)
    return values[0] if values else ""


# ---------------------------------------------------------------------------
# In-document runtime shared by every kind
# ---------------------------------------------------------------------------

def runtime_script(click_param: str, container_param: str) -> str:
    """
    Script included once per creative before the kind-specific script.

    Exposes ``window.adelia`` with ``landing``, ``exit``, ``post`` and
    ``report``. Elements marked ``data-adelia-exit`` are click-through
    zones; anything inside ``data-adelia-chrome`` never triggers an exit.
    """
    return RUNTIME_JS.replace("__CLICK_PARAM__", click_param).replace(
        "__CONTAINER_PARAM__", container_param
    )


RUNTIME_JS = """(function () {
  var root = document.getElementById("adelia-root");
  var query = new URLSearchParams(window.location.search);
  var clickPrefix = query.get("__CLICK_PARAM__") || "";
  var containerId = query.get("__CONTAINER_PARAM__") || "";
  var adelia = window.adelia = {root: root, containerId: containerId, printParams: {}};

  adelia.num = function (name) {
    return Number(root.getAttribute("data-" + name));
  };

  adelia.landing = function (targetUrl) {
    return clickPrefix ? clickPrefix + encodeURIComponent(targetUrl) : targetUrl;
  };

  adelia.post = function (action, fields) {
    var msg = {namespace: "adelia", action: action};
    if (containerId) { msg.containerId = containerId; }
    if (fields) {
      for (var key in fields) {
        if (Object.prototype.hasOwnProperty.call(fields, key)) { msg[key] = fields[key]; }
      }
    }
    try { window.parent.postMessage(msg, "*"); } catch (err) { return; }
    if (window.top !== window.parent) {
      try { window.top.postMessage(msg, "*"); } catch (err) { return; }
    }
  };

  adelia.report = function (event) {
    if (typeof window.reportEvent === "function") { window.reportEvent(event); }
  };

  adelia.exit = function (targetUrl) {
    adelia.report("click");
    window.open(adelia.landing(targetUrl || root.getAttribute("data-landing")), "_blank");
  };

  document.addEventListener("click", function (e) {
    var el = e.target;
    if (!el || !el.closest) { return; }
    if (el.closest("[data-adelia-chrome]")) { return; }
    var zone = el.closest("[data-adelia-exit]");
    if (!zone) { return; }
    e.preventDefault();
    adelia.exit(zone.getAttribute("data-adelia-exit"));
  });

  window.addEventListener("load", function () {
    var params = {kind: root.getAttribute("data-kind"), width: adelia.num("width"), height: adelia.num("height")};
    for (var key in adelia.printParams) { params[key] = adelia.printParams[key]; }
    adelia.post("print", {params: params});
  });
})();"""
