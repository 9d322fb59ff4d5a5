"""
Store adapter - the narrow read/update/delete contract the report
services depend on, implemented over SQLite.

Callers describe a read as a table, a join list, a predicate list and an
ordering; they never write SQL themselves.
"""
import re
import sqlite3
from collections import namedtuple
from contextlib import contextmanager

# LEFT JOIN <table> AS <alias> ON <left> = <right>
Join = namedtuple('Join', ['table', 'alias', 'left', 'right'])

# <column> <op> ?
Predicate = namedtuple('Predicate', ['column', 'op', 'value'])

# ORDER BY <column> <direction>
Order = namedtuple('Order', ['column', 'direction'])

_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$')
_OPERATORS = ('=', '!=', '<', '<=', '>', '>=')
_DIRECTIONS = ('ASC', 'DESC')


class StoreError(Exception):
    """Raised for any failure talking to the store."""


def _ident(name):
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise StoreError(f'Malformed identifier: {name!r}')
    return name


def _select_list(columns):
    """Columns as 'alias.col' or ('alias.col', 'output_name')."""
    parts = []
    for col in columns:
        if isinstance(col, tuple):
            source, label = col
            parts.append(f'{_ident(source)} AS {_ident(label)}')
        else:
            parts.append(_ident(col))
    return ', '.join(parts)


class SqliteStore:
    """Store adapter over a sqlite3 connection.

    Each write commits on its own unless it runs inside ``atomic()``,
    in which case the outermost block commits or rolls back.
    """

    def __init__(self, conn):
        self.conn = conn
        self._depth = 0

    def _commit(self):
        if self._depth == 0:
            self.conn.commit()

    @contextmanager
    def atomic(self):
        self._depth += 1
        try:
            yield self
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                self.conn.rollback()
            raise
        else:
            self._depth -= 1
            if self._depth == 0:
                try:
                    self.conn.commit()
                except sqlite3.Error as e:
                    raise StoreError(str(e)) from e

    def select(self, table, columns=None, joins=(), predicates=(), order=()):
        """Run one read and return the rows as dicts."""
        sql = 'SELECT {} FROM {}'.format(
            _select_list(columns) if columns else '*', _ident(table))
        for join in joins:
            sql += ' LEFT JOIN {} AS {} ON {} = {}'.format(
                _ident(join.table), _ident(join.alias),
                _ident(join.left), _ident(join.right))

        params = []
        clauses = []
        for pred in predicates:
            if pred.op not in _OPERATORS:
                raise StoreError(f'Unsupported operator: {pred.op!r}')
            clauses.append(f'{_ident(pred.column)} {pred.op} ?')
            params.append(pred.value)
        if clauses:
            sql += ' WHERE ' + ' AND '.join(clauses)

        if order:
            terms = []
            for o in order:
                direction = o.direction.upper()
                if direction not in _DIRECTIONS:
                    raise StoreError(f'Unsupported ordering: {o.direction!r}')
                terms.append(f'{_ident(o.column)} {direction}')
            sql += ' ORDER BY ' + ', '.join(terms)

        try:
            cur = self.conn.execute(sql, params)
            rows = cur.fetchall()
            cur.close()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        return [dict(r) for r in rows]

    def get(self, table, row_id):
        rows = self.select(table, predicates=[Predicate('id', '=', row_id)])
        return rows[0] if rows else None

    def insert(self, table, fields):
        names = [_ident(name) for name in fields]
        sql = 'INSERT INTO {} ({}) VALUES ({})'.format(
            _ident(table), ', '.join(names), ', '.join('?' for _ in names))
        try:
            self.conn.execute(sql, list(fields.values()))
            self._commit()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        return fields.get('id')

    def update(self, table, row_id, fields):
        """Apply a partial field set to one row. Returns rows affected."""
        if not fields:
            raise StoreError('Nothing to update')
        assignments = ', '.join(f'{_ident(name)} = ?' for name in fields)
        sql = f'UPDATE {_ident(table)} SET {assignments} WHERE id = ?'
        try:
            cur = self.conn.execute(sql, list(fields.values()) + [row_id])
            self._commit()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        return cur.rowcount

    def delete(self, table, row_id):
        """Hard-delete one row. Returns rows affected."""
        try:
            cur = self.conn.execute(
                f'DELETE FROM {_ident(table)} WHERE id = ?', [row_id])
            self._commit()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        return cur.rowcount


def get_store():
    """Store bound to the current request's connection."""
    from facility_admin.services.db import get_db
    return SqliteStore(get_db())
