"""
The evaluation environment: declared items, name lookup, evaluation and
statement execution.
"""

import logging
import typing

from ackulator.core import aliased
from ackulator.core import data
from ackulator.core import describe
from ackulator.core import errors
from ackulator.core import expression
from ackulator.core import iterables
from ackulator.core import metric
from ackulator.core import scalar
from ackulator.core import statement
from ackulator.core import storage


logger = logging.getLogger(__name__)


OnShow = typing.Callable[[data.Data, 'Instance'], None]


BUILTIN_ENTITY_CLASSES = {
    metric.PrefixType.METRIC: ('metric',),
    metric.PrefixType.PARTIAL_METRIC: ('partial_metric',),
}
"""Entity classes that every instance declares, keyed by the prefix type
that tagging a unit declaration with them selects.

Because these names are taken from the start, a program that declares
`make entity_class called metric` itself fails with a name collision."""


def _log_description(value: data.Data, instance: 'Instance') -> None:
    """Default handler for show statements."""
    logger.info(describe.describe(value, instance))


class Instance:
    """A session of declarations and evaluations.

    An instance owns one storage pool per kind of declared item and three
    independent namespaces: meta items (unit classes, units and entity
    classes), values (entities) and labels (any data). Declarations only ever
    add to these, and a name in one namespace does not hide the same name in
    another; see `~data.AmbiguousItem` for how lookups choose between them.
    """

    def __init__(
        self,
        ambiguity: data.Ambiguity=data.Ambiguity.PREFER_VALUES,
        on_show: OnShow=None,
    ) -> None:
        """
        Parameters
        ----------
        ambiguity : `~data.Ambiguity`, default=PREFER_VALUES
            The lookup policy for expressions evaluated without an explicit
            policy.

        on_show : callable, optional
            Called with each datum that a show statement produces, and with
            this instance. The default logs the description of the datum.
        """
        self.ambiguity = ambiguity
        self.on_show = on_show or _log_description
        self.unit_classes = storage.StoragePool(metric.UnitClass)
        self.units = storage.StoragePool(metric.Unit)
        self.entity_classes = storage.StoragePool(metric.EntityClass)
        self.meta_items: aliased.ManyToOneMap[str, data.Data] = (
            aliased.ManyToOneMap()
        )
        self.values: aliased.ManyToOneMap[str, data.Entity] = (
            aliased.ManyToOneMap()
        )
        self.labels: aliased.ManyToOneMap[str, data.Data] = (
            aliased.ManyToOneMap()
        )
        self._prefix_tags = {
            self.declare_entity_class(metric.EntityClass(names)): prefix_type
            for prefix_type, names in BUILTIN_ENTITY_CLASSES.items()
        }

    def __getitem__(self, __id: storage.StorageId):
        """Look up a declared item by its identifier."""
        pools = (self.unit_classes, self.units, self.entity_classes)
        for pool in pools:
            if __id.kind is pool.kind:
                return pool[__id]
        raise TypeError(f"No storage for {__id!r}") from None

    def name_of(self, __id: storage.StorageId) -> str:
        """The canonical (first) name of a declared item."""
        return self[__id].names[0]

    # Declarations

    def declare_unit_class(
        self,
        unit_class: metric.UnitClass,
    ) -> metric.UnitClassId:
        """Declare a dimension under all of its names, or none."""
        this = self.unit_classes.next_id()
        composite = metric.CompositeUnitClass.of(this)
        self.meta_items.declare(
            unit_class.names,
            data.UnitClassData(composite),
        )
        self.unit_classes.push(unit_class)
        logger.debug("Declared unit class %s", ', '.join(unit_class.names))
        return this

    def declare_unit(
        self,
        unit: metric.Unit,
        prefix_type: metric.PrefixType=metric.PrefixType.NONE,
    ) -> metric.UnitId:
        """Declare a unit and its prefixed variants, or nothing at all.

        Every name of the unit and of each generated variant must be free
        before any of them is registered.
        """
        variants = metric.variants(unit, prefix_type)
        names = [n for u in (unit, *variants) for n in u.names]
        taken = self.meta_items.collisions(names)
        taken.extend(iterables.repeated(names))
        if taken:
            raise errors.NameCollisionError(iterables.unique(*taken))
        declared = []
        for this in (unit, *variants):
            uid = self.units.next_id()
            composite = metric.CompositeUnit.of(uid)
            self.meta_items.insert(this.names, data.UnitData(composite))
            declared.append(self.units.push(this))
        logger.debug(
            "Declared unit %s with %d prefixed variants",
            ', '.join(unit.names),
            len(variants),
        )
        return declared[0]

    def declare_entity_class(
        self,
        entity_class: metric.EntityClass,
    ) -> metric.EntityClassId:
        """Declare an entity class under all of its names, or none."""
        this = self.entity_classes.next_id()
        self.meta_items.declare(entity_class.names, data.EntityClassData(this))
        self.entity_classes.push(entity_class)
        logger.debug("Declared entity class %s", ', '.join(entity_class.names))
        return this

    def declare_label(
        self,
        names: typing.Iterable[str],
        value: data.Data,
    ) -> None:
        """Name arbitrary data, under all of `names` or none."""
        self.labels.declare(names, value)

    def declare_value(
        self,
        names: typing.Iterable[str],
        value: data.Entity,
    ) -> None:
        """Name an entity, under all of `names` or none."""
        if not isinstance(value, data.Entity):
            raise errors.TypeMismatchError(
                "Only an entity can be declared as a value"
            ) from None
        self.values.declare(names, value)

    # Evaluation

    def lookup_item(self, name: str) -> data.AmbiguousItem:
        """Look up `name` in every namespace at once."""
        return data.AmbiguousItem(
            name=name,
            as_meta=self.meta_items.get(name),
            as_value=self.values.get(name),
            as_label=self.labels.get_key_value(name),
        )

    def resolve_expression(
        self,
        expr: expression.Expression,
        ambiguity: data.Ambiguity=None,
    ) -> data.Data:
        """Evaluate an expression.

        Parameters
        ----------
        expr
            The expression to evaluate.

        ambiguity : `~data.Ambiguity`, optional
            How to choose between namespaces that share a name. The default
            is this instance's policy.
        """
        ambiguity = ambiguity or self.ambiguity
        if isinstance(expr, expression.NumericLiteral):
            return scalar.Scalar(expr.value)
        if isinstance(expr, expression.StringLiteral):
            return data.String(expr.text)
        if isinstance(expr, expression.LookupName):
            return self.lookup_item(expr.name).resolve(ambiguity)
        if isinstance(expr, expression.UnaryExpr):
            operand = self.resolve_expression(expr.operand, ambiguity)
            return self._unary(expr.op, operand)
        if isinstance(expr, expression.BinaryExpr):
            lhs = self.resolve_expression(expr.lhs, ambiguity)
            rhs = self.resolve_expression(expr.rhs, ambiguity)
            return self._binary(lhs, expr.op, rhs)
        if isinstance(expr, expression.ApplyFunction):
            raise errors.UnimplementedFeatureError(
                "Function application is not supported yet"
            ) from None
        if isinstance(expr, expression.BuildEntity):
            return self._build_entity(expr, ambiguity)
        raise TypeError(f"Unknown expression {expr!r}") from None

    def _build_entity(
        self,
        expr: expression.BuildEntity,
        ambiguity: data.Ambiguity,
    ) -> data.Entity:
        """Evaluate an entity literal."""
        classes = []
        for name in expr.class_names:
            found = self.lookup_item(name).resolve(data.Ambiguity.PREFER_META)
            if not isinstance(found, data.EntityClassData):
                raise errors.TypeMismatchError(
                    f"{name!r} is not an entity class"
                ) from None
            classes.append(found.id)
        properties = {}
        for name, value in expr.properties:
            if name in properties:
                raise errors.TypeMismatchError(
                    f"Property {name!r} is given more than once"
                ) from None
            properties[name] = self.resolve_expression(value, ambiguity)
        return data.Entity(properties, classes)

    def _unary(self, op: expression.UnaryOp, operand: data.Data) -> data.Data:
        """Apply a unary operator."""
        negate = op is expression.UnaryOp.NEGATE
        if negate and isinstance(operand, scalar.Scalar):
            return -operand
        raise errors.TypeMismatchError(
            f"Can't apply {op.value!r} to {_kind(operand)}"
        ) from None

    def _binary(
        self,
        lhs: data.Data,
        op: expression.BinaryOp,
        rhs: data.Data,
    ) -> data.Data:
        """Apply a binary operator to every supported pairing of data."""
        pair = (lhs, rhs)
        if _any(pair, data.EntityClassData):
            raise errors.TypeMismatchError(
                "An entity class can't be used in arithmetic"
            ) from None
        if _mixed(pair, data.UnitData, data.UnitClassData):
            raise errors.TypeMismatchError(
                "A unit can't be combined with a unit class"
            ) from None
        if _any(pair, (data.Entity, data.String)):
            raise errors.TypeMismatchError(
                f"Can't apply {op.value!r} to {_kind(lhs)} and {_kind(rhs)}"
            ) from None
        if _both(pair, data.UnitData):
            return data.UnitData(_compose(lhs.composite, op, rhs.composite))
        if _both(pair, data.UnitClassData):
            return data.UnitClassData(
                _compose(lhs.composite, op, rhs.composite)
            )
        if _mixed(pair, scalar.Scalar, data.UnitClassData):
            raise errors.TypeMismatchError(
                "A unit class has no numeric value"
            ) from None
        if _mixed(pair, scalar.Scalar, data.UnitData):
            if op not in {expression.BinaryOp.MUL, expression.BinaryOp.DIV}:
                raise errors.TypeMismatchError(
                    f"Can't apply {op.value!r} to a value and a unit"
                ) from None
            lhs, rhs = (self.as_scalar(this) for this in pair)
            return self._scalar_binary(lhs, op, rhs)
        if _both(pair, scalar.Scalar):
            return self._scalar_binary(lhs, op, rhs)
        raise TypeError(f"Unknown data in {pair!r}") from None

    def as_scalar(self, value: data.Data) -> scalar.Scalar:
        """Convert a unit to the scalar equal to one of it.

        Scalars pass through unchanged.
        """
        if isinstance(value, data.UnitData):
            return scalar.Scalar.from_unit(value.composite, self)
        if isinstance(value, scalar.Scalar):
            return value
        raise errors.TypeMismatchError(
            f"Expected a value, not {_kind(value)}"
        ) from None

    def _scalar_binary(
        self,
        lhs: scalar.Scalar,
        op: expression.BinaryOp,
        rhs: scalar.Scalar,
    ) -> scalar.Scalar:
        """Apply a binary operator to two scalars."""
        if op is expression.BinaryOp.ADD:
            return lhs.add(rhs)
        if op is expression.BinaryOp.SUB:
            return lhs.sub(rhs)
        if op is expression.BinaryOp.MUL:
            return lhs.mul(rhs)
        if op is expression.BinaryOp.DIV:
            return lhs.div(rhs)
        if op is expression.BinaryOp.POW:
            return lhs.pow(rhs, self)
        raise TypeError(f"Unknown operator {op!r}") from None

    # Statements

    def execute_statement(
        self,
        this: statement.Statement,
    ) -> typing.Optional[data.Data]:
        """Carry out a single statement.

        Returns
        -------
        The datum shown by a show statement, otherwise ``None``.

        Raises
        ------
        `~errors.AckulatorError`
            The statement failed. Nothing it would have declared has been
            registered.
        """
        try:
            return self._execute(this)
        except errors.AckulatorError as err:
            logger.info("%s failed: %s", type(this).__name__, err)
            raise

    def _execute(self, this: statement.Statement):
        if isinstance(this, statement.MakeUnitClass):
            self.declare_unit_class(metric.UnitClass(this.names))
        elif isinstance(this, statement.MakeBaseUnit):
            self._make_base_unit(this)
        elif isinstance(this, statement.MakeDerivedUnit):
            self._make_derived_unit(this)
        elif isinstance(this, statement.MakeEntityClass):
            # The builder does not configure the class yet, but it must
            # still evaluate without error.
            self._resolve_entity(this.value)
            self.declare_entity_class(metric.EntityClass(this.names))
        elif isinstance(this, statement.MakeLabel):
            self.declare_label(this.names, self.resolve_expression(this.value))
        elif isinstance(this, statement.MakeValue):
            self.declare_value(this.names, self._resolve_entity(this.value))
        elif isinstance(this, statement.Show):
            result = self.resolve_expression(this.value)
            self.on_show(result, self)
            return result
        else:
            raise TypeError(f"Unknown statement {this!r}") from None

    def execute(self, program: str) -> typing.List[data.Data]:
        """Parse and run a whole program, stopping at the first error.

        Returns
        -------
        list
            The data shown by the program's show statements, in order.
        """
        shown = []
        for this in statement.parse_program(program):
            result = self.execute_statement(this)
            if result is not None:
                shown.append(result)
        return shown

    def _resolve_entity(self, expr: expression.Expression) -> data.Entity:
        """Evaluate an expression that must produce an entity."""
        result = self.resolve_expression(expr)
        if not isinstance(result, data.Entity):
            raise errors.TypeMismatchError(
                f"Expected an entity, not {_kind(result)}"
            ) from None
        return result

    def _make_base_unit(self, this: statement.MakeBaseUnit) -> None:
        entity = self._resolve_entity(this.value)
        fields = _extract(
            entity,
            {'class': data.UnitClassData, 'symbol': data.String},
        )
        unit = metric.Unit(
            names=this.names,
            unit_class=fields['class'].composite,
            symbol=fields['symbol'].text,
            base_ratio=1.0,
        )
        self.declare_unit(unit, self._prefix_type(entity))

    def _make_derived_unit(self, this: statement.MakeDerivedUnit) -> None:
        entity = self._resolve_entity(this.value)
        fields = _extract(
            entity,
            {'symbol': data.String, 'value': (scalar.Scalar, data.UnitData)},
        )
        value = self.as_scalar(fields['value'])
        unit = metric.Unit(
            names=this.names,
            unit_class=value.unit,
            symbol=fields['symbol'].text,
            base_ratio=value.value,
        )
        self.declare_unit(unit, self._prefix_type(entity))

    def _prefix_type(self, entity: data.Entity) -> metric.PrefixType:
        """Determine prefix generation from an entity's class tags."""
        unknown = [c for c in entity.classes if c not in self._prefix_tags]
        if unknown:
            names = ', '.join(repr(self.name_of(c)) for c in sorted(unknown))
            raise errors.TypeMismatchError(
                f"A unit declaration can't be tagged with {names}"
            ) from None
        tags = {self._prefix_tags[c] for c in entity.classes}
        if len(tags) > 1:
            raise errors.TypeMismatchError(
                "A unit can't be both metric and partially metric"
            ) from None
        return tags.pop() if tags else metric.PrefixType.NONE


def _any(pair, kinds) -> bool:
    return any(isinstance(this, kinds) for this in pair)


def _both(pair, kinds) -> bool:
    return all(isinstance(this, kinds) for this in pair)


def _mixed(pair, a, b) -> bool:
    """True if `pair` holds one `a` and one `b`, in either order."""
    lhs, rhs = pair
    return (
        isinstance(lhs, a) and isinstance(rhs, b)
        or isinstance(lhs, b) and isinstance(rhs, a)
    )


def _compose(lhs, op: expression.BinaryOp, rhs):
    """Multiply or divide two composites."""
    if op is expression.BinaryOp.MUL:
        return lhs * rhs
    if op is expression.BinaryOp.DIV:
        return lhs / rhs
    raise errors.TypeMismatchError(
        f"Can't apply {op.value!r} to units or unit classes"
    ) from None


def _extract(
    entity: data.Entity,
    required: typing.Mapping[str, typing.Union[type, typing.Tuple[type, ...]]],
) -> typing.Dict[str, data.Data]:
    """Check that an entity has exactly the `required` properties.

    Parameters
    ----------
    entity
        The entity to inspect.

    required
        A mapping from property name to the type (or tuple of types) that
        the property's value must have.
    """
    missing = [name for name in required if name not in entity.properties]
    if missing:
        raise errors.TypeMismatchError(
            f"Missing required properties: {', '.join(missing)}"
        ) from None
    extra = [name for name in entity.properties if name not in required]
    if extra:
        raise errors.TypeMismatchError(
            f"Unexpected properties: {', '.join(extra)}"
        ) from None
    for name, kind in required.items():
        value = entity.properties[name]
        if not isinstance(value, kind):
            raise errors.TypeMismatchError(
                f"Property {name!r} can't be {_kind(value)}"
            ) from None
    return dict(entity.properties)


_KINDS = {
    data.UnitClassData: 'a unit class',
    data.UnitData: 'a unit',
    data.EntityClassData: 'an entity class',
    scalar.Scalar: 'a value',
    data.Entity: 'an entity',
    data.String: 'a string',
}


def _kind(value: data.Data) -> str:
    """A short description of the kind of `value`, for error messages."""
    return _KINDS.get(type(value), type(value).__name__)
