"""
JXA sources run by ThingsBridge

Each script defines `main(app, args)`. The bridge prepends PRELUDE, which
provides `run(argv)` (decodes the JSON payload, checks Things3 is running,
JSON-encodes the return value) plus the serializers and lookups below.
"""

PRELUDE = r"""
function iso(d) {
  if (!d) { return null; }
  return d.toISOString();
}

function day(d) {
  if (!d) { return null; }
  const pad = (n) => (n < 10 ? '0' + n : '' + n);
  return d.getFullYear() + '-' + pad(d.getMonth() + 1) + '-' + pad(d.getDate());
}

function parseDay(s) {
  const parts = s.split('-').map(Number);
  return new Date(parts[0], parts[1] - 1, parts[2]);
}

function tagList(s) {
  if (!s) { return []; }
  return s.split(',').map((t) => t.trim()).filter((t) => t.length > 0);
}

function safe(fn) {
  try { return fn(); } catch (e) { return null; }
}

function todoJSON(t) {
  const project = safe(() => t.project());
  const area = safe(() => t.area());
  return {
    id: t.id(),
    title: t.name(),
    notes: t.notes(),
    status: t.status(),
    tags: tagList(t.tagNames()),
    when: day(safe(() => t.activationDate())),
    deadline: day(safe(() => t.dueDate())),
    created: iso(t.creationDate()),
    modified: iso(t.modificationDate()),
    completed: iso(safe(() => t.completionDate())),
    project: project ? { id: project.id(), title: project.name() } : null,
    area: area ? { id: area.id(), title: area.name() } : null,
  };
}

function projectJSON(p, withItems) {
  const area = safe(() => p.area());
  const out = {
    id: p.id(),
    title: p.name(),
    notes: p.notes(),
    status: p.status(),
    tags: tagList(p.tagNames()),
    when: day(safe(() => p.activationDate())),
    deadline: day(safe(() => p.dueDate())),
    area: area ? { id: area.id(), title: area.name() } : null,
  };
  if (withItems) {
    out.items = p.toDos().map(todoJSON);
  }
  return out;
}

function areaJSON(a) {
  return { id: a.id(), title: a.name(), tags: tagList(a.tagNames()) };
}

function exists(obj) {
  try { obj.id(); return true; } catch (e) { return false; }
}

function findTodo(app, id) {
  const t = app.toDos.byId(id);
  if (!exists(t)) { throw new Error('To-do not found: ' + id); }
  return t;
}

function findProject(app, id) {
  const p = app.projects.byId(id);
  if (!exists(p)) { throw new Error('Project not found: ' + id); }
  return p;
}

function findArea(app, id) {
  const a = app.areas.byId(id);
  if (!exists(a)) { throw new Error('Area not found: ' + id); }
  return a;
}

function findItem(app, id) {
  const t = app.toDos.byId(id);
  if (exists(t)) { return t; }
  const p = app.projects.byId(id);
  if (exists(p)) { return p; }
  throw new Error('Item not found: ' + id);
}

function schedule(app, item, when) {
  if (when === 'today' || when === 'anytime' || when === 'someday') {
    const names = { today: 'Today', anytime: 'Anytime', someday: 'Someday' };
    app.move(item, { to: app.lists.byName(names[when]) });
  } else {
    app.schedule(item, { for: parseDay(when) });
  }
}

function applyFields(app, item, args) {
  if (args.title !== undefined) { item.name = args.title; }
  if (args.notes !== undefined) { item.notes = args.notes; }
  if (args.tags !== undefined) { item.tagNames = args.tags.join(', '); }
  if (args.deadline !== undefined) { item.dueDate = parseDay(args.deadline); }
  if (args.when !== undefined) { schedule(app, item, args.when); }
}

function run(argv) {
  const app = Application(APP_NAME);
  if (REQUIRE_RUNNING && !app.running()) {
    throw new Error(APP_NAME + ' is not running');
  }
  const args = argv.length > 0 ? JSON.parse(argv[0]) : {};
  const result = main(app, args);
  return result === undefined ? '' : JSON.stringify(result);
}
"""

# --- to-dos ---

TODOS_LIST = r"""
function main(app, args) {
  const lists = {
    inbox: 'Inbox', today: 'Today', upcoming: 'Upcoming', anytime: 'Anytime',
    someday: 'Someday', logbook: 'Logbook', trash: 'Trash',
  };
  let todos;
  if (args.project_id) {
    todos = findProject(app, args.project_id).toDos();
  } else if (args.area_id) {
    todos = findArea(app, args.area_id).toDos();
  } else if (args.filter) {
    todos = app.lists.byName(lists[args.filter]).toDos();
  } else {
    todos = app.toDos();
  }
  let items = todos.map(todoJSON);
  if (args.tag) { items = items.filter((t) => t.tags.indexOf(args.tag) >= 0); }
  if (args.status) { items = items.filter((t) => t.status === args.status); }
  return items.slice(0, args.limit);
}
"""

TODOS_GET = r"""
function main(app, args) {
  return todoJSON(findTodo(app, args.id));
}
"""

TODOS_CREATE = r"""
function main(app, args) {
  const props = { name: args.title };
  if (args.notes !== undefined) { props.notes = args.notes; }
  if (args.tags !== undefined) { props.tagNames = args.tags.join(', '); }
  if (args.deadline !== undefined) { props.dueDate = parseDay(args.deadline); }
  const t = app.ToDo(props);
  if (args.project_id) {
    findProject(app, args.project_id).toDos.push(t);
  } else if (args.area_id) {
    findArea(app, args.area_id).toDos.push(t);
  } else {
    app.toDos.push(t);
  }
  if (args.when !== undefined) { schedule(app, t, args.when); }
  return todoJSON(t);
}
"""

TODOS_UPDATE = r"""
function main(app, args) {
  const t = findTodo(app, args.id);
  applyFields(app, t, args);
  return todoJSON(t);
}
"""

TODOS_SET_STATUS = r"""
function main(app, args) {
  const t = findTodo(app, args.id);
  t.status = args.status;
  return todoJSON(t);
}
"""

TODOS_DELETE = r"""
function main(app, args) {
  const t = findTodo(app, args.id);
  app.delete(t);
  return { id: args.id, deleted: true };
}
"""

# --- projects ---

PROJECTS_LIST = r"""
function main(app, args) {
  let projects = args.area_id ? findArea(app, args.area_id).projects() : app.projects();
  let items = projects.map((p) => projectJSON(p, args.include_items));
  if (args.status) { items = items.filter((p) => p.status === args.status); }
  return items;
}
"""

PROJECTS_GET = r"""
function main(app, args) {
  return projectJSON(findProject(app, args.id), true);
}
"""

PROJECTS_CREATE = r"""
function main(app, args) {
  const props = { name: args.title };
  if (args.notes !== undefined) { props.notes = args.notes; }
  if (args.tags !== undefined) { props.tagNames = args.tags.join(', '); }
  if (args.deadline !== undefined) { props.dueDate = parseDay(args.deadline); }
  const p = app.Project(props);
  app.projects.push(p);
  if (args.area_id) { p.area = findArea(app, args.area_id); }
  if (args.when !== undefined) { schedule(app, p, args.when); }
  return projectJSON(p, false);
}
"""

PROJECTS_UPDATE = r"""
function main(app, args) {
  const p = findProject(app, args.id);
  applyFields(app, p, args);
  if (args.area_id !== undefined) { p.area = findArea(app, args.area_id); }
  return projectJSON(p, false);
}
"""

PROJECTS_COMPLETE = r"""
function main(app, args) {
  const p = findProject(app, args.id);
  p.status = 'completed';
  return projectJSON(p, false);
}
"""

# --- areas ---

AREAS_LIST = r"""
function main(app, args) {
  return app.areas().map(areaJSON);
}
"""

AREAS_CREATE = r"""
function main(app, args) {
  const props = { name: args.title };
  if (args.tags !== undefined) { props.tagNames = args.tags.join(', '); }
  const a = app.Area(props);
  app.areas.push(a);
  return areaJSON(a);
}
"""

# --- tags ---

TAGS_LIST = r"""
function main(app, args) {
  return app.tags().map((t) => {
    const parent = safe(() => t.parentTag());
    return { name: t.name(), parent: parent ? parent.name() : null };
  });
}
"""

TAGS_CREATE = r"""
function main(app, args) {
  const existing = app.tags.byName(args.name);
  if (exists(existing)) { throw new Error('Tag already exists: ' + args.name); }
  const tag = app.Tag({ name: args.name });
  app.tags.push(tag);
  if (args.parent) { tag.parentTag = app.tags.byName(args.parent); }
  return { name: args.name, parent: args.parent || null };
}
"""

TAGS_ASSIGN = r"""
function main(app, args) {
  const item = findItem(app, args.id);
  let tags = tagList(item.tagNames());
  if (args.mode === 'add') {
    args.tags.forEach((t) => { if (tags.indexOf(t) < 0) { tags.push(t); } });
  } else {
    tags = tags.filter((t) => args.tags.indexOf(t) < 0);
  }
  item.tagNames = tags.join(', ');
  return { id: args.id, tags: tags };
}
"""

# --- bulk ---

BULK_MOVE = r"""
function main(app, args) {
  const lists = { inbox: 'Inbox', today: 'Today', anytime: 'Anytime', someday: 'Someday' };
  const moved = [];
  args.ids.forEach((id) => {
    const t = findTodo(app, id);
    if (args.project_id) {
      t.project = findProject(app, args.project_id);
    } else if (args.area_id) {
      t.area = findArea(app, args.area_id);
    } else {
      app.move(t, { to: app.lists.byName(lists[args.list]) });
    }
    moved.push(id);
  });
  return { moved: moved, count: moved.length };
}
"""

BULK_COMPLETE = r"""
function main(app, args) {
  const completed = [];
  args.ids.forEach((id) => {
    findTodo(app, id).status = 'completed';
    completed.push(id);
  });
  return { completed: completed, count: completed.length };
}
"""

BULK_UPDATE_DATES = r"""
function main(app, args) {
  const updated = [];
  args.ids.forEach((id) => {
    const t = findTodo(app, id);
    applyFields(app, t, { when: args.when, deadline: args.deadline });
    updated.push(id);
  });
  return { updated: updated, count: updated.length };
}
"""

# --- logbook ---

LOGBOOK_SEARCH = r"""
function main(app, args) {
  const since = args.since ? parseDay(args.since) : null;
  const until = args.until ? parseDay(args.until) : null;
  if (until) { until.setDate(until.getDate() + 1); }
  const query = args.query ? args.query.toLowerCase() : null;
  const items = [];
  const todos = app.lists.byName('Logbook').toDos();
  for (let i = 0; i < todos.length && items.length < args.limit; i++) {
    const t = todos[i];
    const done = safe(() => t.completionDate());
    if (since && (!done || done < since)) { continue; }
    if (until && (!done || done >= until)) { continue; }
    if (query) {
      const text = (t.name() + '\n' + t.notes()).toLowerCase();
      if (text.indexOf(query) < 0) { continue; }
    }
    items.push(todoJSON(t));
  }
  return items;
}
"""

# --- system ---

SYSTEM_REFRESH = r"""
function main(app, args) {
  app.logCompletedNow();
  return { refreshed: true };
}
"""

SYSTEM_LAUNCH = r"""
function main(app, args) {
  const wasRunning = app.running();
  if (!wasRunning) { app.launch(); }
  return { launched: !wasRunning, running: app.running() };
}
"""

SYSTEM_STATUS = r"""
function main(app, args) {
  const running = app.running();
  return { running: running, version: running ? app.version() : null };
}
"""
