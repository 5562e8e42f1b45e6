# meshcheck

Helpers for writing end-to-end tests against a service mesh: retrying flaky
checks, adjusting HTTP requests made with `requests`, rendering YAML manifests
from templates and comparing platform versions.

## Installation

```
pip install .
pip install ".[test]"   # with pytest, to run the test suite
```

## Modules

### `meshcheck.version`

`parse_version(text)` accepts strings such as `v2.1`, `v2.1.0` or `4.10.0` and
returns a frozen `Version` with `major` and `minor`. Anything without a numeric
major and minor part raises `ValueError`. A `Version` compares through
`equals`, `less_than`, `less_than_or_equal`, `greater_than` and
`greater_than_or_equal`, and its text form is `v<major>.<minor>`.

Ready-made constants: `OCP_4_9` to `OCP_4_14` and `SMCP_2_0` to `SMCP_2_5`.

### `meshcheck.helpers`

- `is_within_percentage(count, total, rate, tolerance)` tells whether `count`
  lies between `int((rate - tolerance) * total)` and
  `int((rate + tolerance) * total)`, both ends included.
- `generate_strings(prefix, count)` returns `["<prefix>0", "<prefix>1", ...]`.
  A negative count raises `ValueError`.

### `meshcheck.retry`

- `options()` returns the default `RetryOptions`: 60 attempts, a 1 second
  delay, attempts logged. `with_max_attempts`, `with_delay` (seconds) and
  `with_log_attempts` each return a changed copy.
- `until_success(func, options=None, log=None, log_failed_attempts=True)`
  calls `func` until it returns without raising, and returns that value.
  Failed attempts before the last are swallowed and retried after the delay.
  The exception of the last attempt propagates. Messages go to `log`, or to
  the module's `logging` logger when `log` is not given. A warning is emitted
  when success took 75% or 90% of the allowed attempts.
- `attempt(func)` runs `func` once and returns an `AttemptResult` with
  `value`, `error` and `failed`.

### `meshcheck.request`

Each option is a `RequestOption` with `apply_to_request(request)`, which acts
on a `requests.Request` or `PreparedRequest`, and `apply_to_client(session)`,
which acts on a `requests.Session`.

- `with_header(name, value)` returns a `HeaderOption` that sets a header and
  replaces any existing value, whatever its case.
- `with_host(host)` returns a `HostOption` that sets the `Host` header.
- `combine(*options)` returns an `OptionList` that applies options in order.
- `with_tls(cacert_file, host, ingress_host, secure_ingress_port)` returns a
  `TLSOption`. On the session it trusts the given CA file and mounts adapters
  that send requests for `host:secure_ingress_port` to
  `ingress_host:secure_ingress_port`, with a 30 second connect timeout.
  `.with_client_certificate(cert_file, key_file)` adds a client certificate.

### `meshcheck.template`

- `render(template, variables=None, images=None)` renders a Jinja2 template.
  `variables` may be a mapping, a dataclass instance or any object whose
  public attributes are used. The template can call `toYaml` / `to_yaml`
  (also available as filters), `indent`, `until` and `image`.
- `ImageCatalog.load(path, arch)` reads a YAML file that maps image names to
  architectures to container images. `catalog.image(name)` looks one up and
  backs the template function `image`.
- `to_yaml(value)`, `indent(spaces, source)`, `until(n)` and
  `add_line_numbers(text)` are also usable on their own.
- Every failure raises `TemplateError`. A syntax error's message carries the
  template with line numbers.

## Example

```python
import requests

from meshcheck import retry
from meshcheck.request import combine, with_header, with_host
from meshcheck.version import SMCP_2_3, parse_version


def fetch():
    req = requests.Request("GET", "http://localhost:8080/headers")
    combine(with_host("app.example.com"), with_header("X-Trace", "1")).apply_to_request(req)
    with requests.Session() as session:
        resp = session.send(req.prepare(), timeout=5)
    resp.raise_for_status()
    return resp.text


if parse_version("v2.4").greater_than_or_equal(SMCP_2_3):
    body = retry.until_success(fetch, retry.options().with_max_attempts(5).with_delay(0.5))
```

## What it does not do

The package does not run shell or cluster commands (for example `oc` or
`kubectl`) and does not install or inspect a mesh. It provides no
command-line entry point. The checks themselves, and whatever tools they
call, are left to the caller.