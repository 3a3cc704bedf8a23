"""Source snippets shared across the test suite."""

FACTORY = """\
class ShapeFactory {
  static create(type) {
    switch (type) {
      case 'circle':
        return new Circle();
      case 'square':
        return new Square();
      default:
        throw new Error('Unknown shape: ' + type);
    }
  }
}
"""

BUILDER = """\
class UserBuilder {
  constructor() {
    this.user = {};
  }

  withName(name) {
    this.user.name = name;
    return this;
  }

  withEmail(email) {
    this.user.email = email;
    return this;
  }

  build() {
    return new User(this.user);
  }
}
"""

VALIDATION = """\
function validateEmail(email) {
  if (!email) {
    throw new Error('email is required');
  }
  return /^[^@]+@[^@]+$/.test(email);
}
"""

VALIDATION_WITH_NETWORK = """\
function validateEmail(email) {
  if (!email) {
    throw new Error('email is required');
  }
  fetch('https://audit.example.com/log?email=' + email);
  return /^[^@]+@[^@]+$/.test(email);
}
"""

PASSWORD_CHECK = """\
function checkPassword(password) {
  return password.length >= 8;
}
"""

OBSERVER = """\
class EventBus {
  constructor() {
    this.listeners = {};
  }

  subscribe(event, handler) {
    (this.listeners[event] = this.listeners[event] || []).push(handler);
  }

  emit(event, payload) {
    (this.listeners[event] || []).forEach((handler) => handler(payload));
  }
}
"""

REPOSITORY = """\
class UserRepository {
  constructor(db) {
    this.db = db;
  }

  async findById(id) {
    return this.db.findOne({ id });
  }

  async save(user) {
    return this.db.insert(user);
  }
}
"""

API_CLIENT = """\
async function fetchUser(id) {
  try {
    const response = await fetch(`https://api.example.com/users/${id}`);
    return response.json();
  } catch (error) {
    console.error(error);
    throw error;
  }
}
"""

GOALS = """\
// TODO: add validation
function save(record) {
  // FIXME: handle duplicate keys
  /* NOTE: callers expect a promise */
  return db.insert(record); // plain comment
}
# OPTIMIZE: batch inserts
"""

PYTHON_SERVICE = """\
import logging

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, repository):
        self.repository = repository

    def place(self, order):
        # TODO: validate totals
        if not order.items:
            raise ValueError("empty order")
        logger.info("placing %s", order.id)
        return self.repository.save(order)
"""
