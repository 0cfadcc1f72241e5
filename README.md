# taskplanner

A small task scheduler served over HTTP. Tasks are kept in an SQLite
database. A task can repeat every few days or every year; when a
repeating task is marked done it moves to its next date.

## Installation

```
pip install .
```

With the test tools:

```
pip install ".[test]"
```

## Running the server

```
taskplanner
```

Options:

- `--db FILE`: the database file (default `scheduler.db`). If it does not
  exist, it is created with the `scheduler` table and an index on `date`.
- `--web DIR`: the directory whose files are served under `/` (default
  `web`). A request for a directory serves its `index.html`.

The listen address comes from the `TODO_PORT` environment variable, in
the form `host:port` or `:port` (for example `:7540`). If it is not set,
the server listens on `:7540`. An address without a colon and port number
is rejected and the command exits with status 1.

## HTTP API

| Method | Path                               | Purpose                                   |
|--------|------------------------------------|-------------------------------------------|
| any    | `/api/nextdate?now=&date=&repeat=` | Next occurrence of a repeat rule, as a JSON number such as `20240127` |
| GET    | `/api/task?id=`                    | Fetch one task                            |
| POST   | `/api/task`                        | Add a task; returns `{"id": "..."}`       |
| PUT    | `/api/task`                        | Update a task (the body carries its `id`) |
| DELETE | `/api/task?id=`                    | Delete a task                             |
| any    | `/api/tasks`                       | `{"tasks": [...]}`: up to 10 tasks, earliest date first |
| any    | `/api/task/done?id=`               | Complete a task: delete it, or move it to its next date after today if it repeats |

Other methods on `/api/task` get `405 Method not allowed`. A task is a
JSON object with the string fields `id`, `date`, `title`, `comment` and
`repeat`. Dates use the `YYYYMMDD` format. Failed requests answer
`400` with `{"error": "..."}`.

### Repeat rules

- `d N`: every N days, where N is from 1 to 400.
- `y`: every year; 29 February moves to 1 March in a year without it.
- Empty: the task does not repeat.

When a task is added or updated, its title must not be blank and its
repeat rule must be valid. An empty date means today. A date before
today moves to today if the task does not repeat, or to its next date
after today if it does.

## Using it as a library

```python
from taskplanner.nextdate import next_date, parse_date
from taskplanner.storage import Task, TaskStore, create_table
from taskplanner.api import normalize_task
from taskplanner.server import create_app

next_date(parse_date("20240126"), "20240113", "d 7")  # "20240127"

create_table("scheduler.db")
store = TaskStore("scheduler.db")
task_id = store.add_task(Task(date="20240127", title="Call the office"))
store.get_task(str(task_id))

app = create_app("scheduler.db", "web")
```

`TaskStore.get_task` and `TaskStore.update_task` raise
`TaskNotFoundError` for an unknown id; a malformed id raises
`ValueError`. `next_date` raises `RepeatRuleError` for an unknown rule
or an interval out of range.

## What it does not do

The package ships no web front-end files; point `--web` at a directory
of your own. There is no search over tasks, no authentication, and no
weekly or monthly repeat rules.