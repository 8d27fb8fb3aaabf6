# ymlfeed

A small HTTP service that reads a dance school's current classes and passes
from a MySQL database and serves them as a YML (Yandex Market Language)
product catalog.

The feed has two categories: single class visits (id 1) and passes (id 2).

- Every visible, current class becomes an offer. Its description is the
  class description (or, failing that, the description of its latest style)
  followed by its weekly schedule, for example
  `По понедельникам и средам в 19:00`. A class without its own price gets
  the single-visit price.
- Every active pass with a description becomes an offer described by how
  many days it lasts, how many lessons it includes, guest visits and
  whether it can be frozen. Passes missing a price, description, period or
  lesson count are left out.
- Two fixed offers always come first among the passes: a first trial lesson
  and a single visit, priced from the configuration.

Names are cut to 250 UTF-8 bytes (ending in `...`) without splitting a
character or an XML entity; a description longer than that gets a shorter
`shortDescription`.

The catalog's `date` attribute changes only when the catalog's content
changes, so consumers can tell when something is really new.

## Installation

```
pip install .
```

## Running

```
ymlfeed
```

The command loads the configuration, connects to the database (exiting with
status 1 if that fails) and serves the feed on the configured port at the
configured path, by default `http://localhost:9999/yandex.yml`. Other paths
answer 404; a database error while building the feed answers 500 with the
error text.

Two optional query parameters set the links used by the offers, and the last
value given is kept for later requests:

- `passlink`: link for pass offers
- `classlink`: link for class offers

## Configuration

Settings come from the environment. A `.env` file in the current directory
is read if present; variables already set in the environment take precedence
over it.

| Variable                | Default                          |
|-------------------------|----------------------------------|
| `FIRST_VISIT_PRICE`     | `300`                            |
| `VISIT_PRICE`           | `700`                            |
| `DB_HOST`               | `localhost`                      |
| `DB_PORT`               | `3306`                           |
| `DB_USER`               | `root`                           |
| `DB_PASSWORD`           | empty                            |
| `DB_NAME`               | `root`                           |
| `PORT`                  | `9999`                           |
| `YANDEX_PATH`           | `/yandex.yml`                    |
| `CLASS_DEFAULT_PICTURE` | the school's logo                |
| `CLASS_DEFAULT_LINK`    | the school's website             |
| `PASS_DEFAULT_PICTURE`  | the school's logo                |
| `PASS_DEFAULT_LINK`     | the school's website             |

An empty variable counts as unset. If a numeric variable is not a valid
integer, its default is used.

## Using it as a library

```python
from ymlfeed.config import load_config
from ymlfeed.repository import Repository, connect
from ymlfeed.render import VersionTracker, render_feed

config = load_config()
repository = Repository(connect(config.database), config)
document = render_feed(repository, config, VersionTracker(), "", "")
```

`render_feed` returns the whole document as bytes, XML declaration included,
and raises `RuntimeError` if fetching classes or passes fails.
`Repository` works with any DB-API connection whose cursors are context
managers. The row converters `class_offer`, `pass_offer` and
`build_schedule` in `ymlfeed.repository`, and `marshal_catalog` and
`hash_bytes` in `ymlfeed.render`, can be used on their own.

`ymlfeed.server.run(config, repository)` starts the HTTP server itself, and
`ymlfeed.server.make_handler(repository, config, tracker)` returns the
request handler class for use with any `http.server` server.

## Limits

The service only reads: it expects the school's existing tables
(`classes`, `studios`, `styles`, `styles_classes`, `ticket_types`) and does
not create or change them. It serves only MySQL.

## Tests

```
pip install .[test]
pytest
```