# wrangler

A library of helpers for Workers projects: checking project settings before
publishing, turning a static-site directory into content-hashed Workers KV
entries, splitting uploads into API-sized batches, deciding how routes should
be deployed, preparing requests for the preview service, and checking
installed tool versions.

Errors are reported by raising `wrangler.config.WranglerError`, with the
message a user should see.

## Modules

- `wrangler.config`: the project model (`Target`, `KvNamespace`, `Site`),
  `missing_publish_fields` and `validate_publish_fields` for the fields
  publishing needs, and `site_incompatible_routes`, which lists route patterns
  that lack a trailing `*`.
- `wrangler.http`: the `User-Agent` string (`user_agent`, `headers`), `client()`
  returning a `requests.Session` with those headers and a 10 s connect / 30 s
  read timeout, and `format_error`, which renders a list of `ApiError` entries
  with optional per-code help text (`status_code_context` explains status 413
  and 504).
- `wrangler.kv`: Workers KV helpers: `kv_help` and `format_error` for KV error
  codes, `validate_target`, `has_duplicate_namespaces`, `get_namespace_id`,
  `url_encode_key`, `validate_binding`, `namespace_snippet` (the
  `wrangler.toml` text for a new namespace) and `site_namespace_title`.
- `wrangler.suggestions`: help text for secrets (`secret_errors`) and routes
  (`route_error_suggestions`) API errors, and `validate_secret_target`.
- `wrangler.key_list`: `KeyList`, an iterator over the keys of a namespace.
  It calls a `fetch_page(cursor, prefix)` function you supply and follows the
  cursor in each page's `result_info` (`extract_cursor`).
- `wrangler.bucket`: `iter_directory` walks a site directory, skipping hidden
  entries and `node_modules` and applying the site's `include` or `exclude`
  globs (`.gitignore` is not read). `directory_keys_values` and
  `directory_keys_only` produce base64 values and content-hashed keys;
  `generate_path_and_key`, `generate_path_with_hash`, `get_digest`,
  `validate_file_size` (10 MiB) and `validate_key_size` (512 bytes) are the
  pieces they are built from.
- `wrangler.upload`: `filter_files` drops pairs already present remotely,
  `batch_pairs` splits the rest into batches of at most 5000 pairs and 50 MiB,
  and `upload_files` does both for a directory, handing each batch to a
  `write_batch(namespace_id, pairs)` function you supply.
- `wrangler.dev`: settings for a local development proxy
  (`make_server_config`, defaulting to `https://example.com` on
  `localhost:8787`; `parse_host`; `resolve_address`), the header rewriting the
  preview service expects (`structure_request_headers`,
  `destructure_response`), `preview_url` and `preview_id`.
- `wrangler.preview`: `HTTPMethod` and `parse_http_method`, the live-reload
  `FiddleMessage`, origin and address checks for incoming websocket
  connections (`is_safe_origin`, `is_safe_address`, `check_connection`),
  `missing_preview_fields`, `preview_cookie` and `browser_url`.
- `wrangler.routes`: `Route`, `RouteUploadResult`, `deploy_route` and
  `publish_routes`, which decide for each route whether it stayed the same,
  conflicts with another script, or must be created through a `create(route)`
  function you supply; plus `routes_error_help`, `build_subdomain_request`,
  `zoneless_address` and `subdomain_api_address`.
- `wrangler.install`: `prebuilt_url` for a tool download on the current (or a
  given) platform, `parse_tool_version`, `latest_version` (asks crates.io) and
  `tool_needs_update` (runs the tool with `--version`).

## Examples

Compute the key under which a site asset is stored:

```python
from pathlib import Path
from wrangler.bucket import generate_path_and_key

path, key = generate_path_and_key(
    Path("./build/path/to/asset.ext"),
    Path("./build"),
    "<h1>Hello World!</h1>",
)
# path == "path/to/asset.ext"
# key  == "path/to/asset.<sha256 hex digest>.ext"
```

Decide how routes are deployed:

```python
from wrangler.routes import Route, publish_routes

existing = [Route("example.com/*", script="my-worker", id="1")]
results = publish_routes(
    [Route("example.com/*", script="my-worker"), Route("example.com/api/*", script="my-worker")],
    existing,
    create=lambda route: Route(route.pattern, route.script, id="2"),
)
print("\n".join(str(result) for result in results))
# example.com/* => stayed the same
# example.com/api/* => created
```

Normalise a host for the development proxy:

```python
from wrangler.dev import parse_host

host = parse_host("example.com")   # no scheme given, so https is assumed
host.is_https()                    # True
str(host)                          # "example.com"
```

## What this package does not do

- There is no command-line program; every feature is a function to call.
- It does not build projects, run external build tools, scaffold new
  projects, or check worker names.
- It does not run the development proxy server, the live-reload websocket
  server, or open a browser; it only prepares the settings, headers, messages
  and URLs those need.
- Apart from `latest_version`, it makes no API calls itself: listing keys,
  writing KV batches and creating routes are done by functions you pass in.
- It does not download or cache tool binaries; `prebuilt_url` only says where
  one would be found.