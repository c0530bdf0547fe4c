"""Tests for object, object-array and mixed-array schemas."""
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
import pytest
from validation import (
    ABSENT,
    Schema,
    ObjectSchema,
    MixedArraySchema
)
from utils.exceptions import ConfigurationError


def make_user_schema():
    return Schema.object().set_field_schemas({
        'name': Schema.string(),
        'age': Schema.number(max=150),
        'role': Schema.string(range=['admin', 'user']).set_default('user'),
        'tags': Schema.string_array(required=False),
        'address': Schema.object(required=False).set_field_schemas({
            'city': Schema.string(),
            'zip': Schema.string(required=False),
        }),
    })


class TestObjectSchema:
    """Tests for ObjectSchema."""

    def test_drops_undeclared_fields(self):
        """Test output holds only declared fields."""
        schema = Schema.object().set_field_schemas({'foo': Schema.string()})
        assert schema.validate({'foo': 'a', 'bar': 1}) == (True, {'foo': 'a'})

    def test_nested_sanitization(self):
        """Test defaults fill in and optional missing fields are omitted."""
        accepted, result = make_user_schema().validate({
            'name': 'ann',
            'age': 30,
            'address': {'city': 'Oslo', 'extra': True},
            'password': 'secret',
        })
        assert accepted
        assert result == {
            'name': 'ann',
            'age': 30,
            'role': 'user',
            'address': {'city': 'Oslo'},
        }
        assert 'tags' not in result

    def test_first_failing_field_rejects(self):
        """Test any failing field rejects the whole object."""
        schema = make_user_schema()
        assert schema.validate({'name': 'ann', 'age': 200}) == (False, ABSENT)
        assert schema.validate({'name': 'ann', 'age': 1, 'address': {}}) == (False, ABSENT)

    def test_field_iteration_stops_at_first_failure(self):
        """Test later fields are not validated after a failure."""
        seen = []

        def track(name):
            def predicate(value):
                seen.append(name)
                return value is not None
            return predicate

        schema = Schema.object().set_field_schemas({
            'a': Schema.string().set_validate(track('a')),
            'b': Schema.string().set_validate(track('b')),
            'c': Schema.string().set_validate(track('c')),
        })
        assert schema.validate({'a': 'x', 'c': 'z'}) == (False, ABSENT)
        assert seen == ['a', 'b']

    def test_null_field_value_with_default(self):
        """Test an explicit None field takes the default."""
        schema = Schema.object(field_schemas={'n': Schema.number(default_value=7)})
        assert schema.validate({'n': None}) == (True, {'n': 7})

    def test_default_none_field_is_kept(self):
        """Test a None default is a value, not ABSENT."""
        schema = Schema.object(field_schemas={'n': Schema.number(default_value=None)})
        assert schema.validate({}) == (True, {'n': None})

    def test_required_nil_object_becomes_empty_mapping(self):
        """Test None is validated as an empty object."""
        assert Schema.object().validate(None) == (True, {})
        schema = Schema.object(field_schemas={'a': Schema.string(required=False)})
        assert schema.validate(None) == (True, {})
        schema = Schema.object(field_schemas={'a': Schema.string()})
        assert schema.validate(None) == (False, ABSENT)

    def test_rejects_non_mappings(self):
        """Test non-mapping input is rejected."""
        schema = Schema.object()
        assert schema.validate('abc') == (False, ABSENT)
        assert schema.validate([{'a': 1}]) == (False, ABSENT)
        assert schema.validate(3) == (False, ABSENT)

    def test_accepts_any_mapping(self):
        """Test read-only mappings are validated into a dict."""
        schema = Schema.object(field_schemas={'a': Schema.number()})
        accepted, result = schema.validate(MappingProxyType({'a': 1}))
        assert accepted
        assert type(result) is dict
        assert result == {'a': 1}

    def test_custom_predicate_bypasses_field_schemas(self):
        """Test a custom predicate copies the whole input."""
        schema = Schema.object().set_field_schemas({'foo': Schema.string()})
        schema.set_validate(lambda value: True)
        value = {'anything': 1}
        accepted, result = schema.validate(value)
        assert (accepted, result) == (True, {'anything': 1})
        assert result is not value

    def test_custom_predicate_rejection(self):
        """Test a failing custom predicate rejects."""
        schema = Schema.object(validate=lambda value: 'id' in value)
        assert schema.validate({'id': 1, 'x': 2}) == (True, {'id': 1, 'x': 2})
        assert schema.validate({'x': 2}) == (False, ABSENT)

    def test_field_schemas_are_copied(self):
        """Test the schema owns its field mapping."""
        fields = {'a': Schema.string()}
        schema = Schema.object(field_schemas=fields)
        fields['b'] = Schema.string()
        assert schema.validate({'a': 'x'}) == (True, {'a': 'x'})

    def test_merge_adds_fields(self):
        """Test merge copies the other schema's fields."""
        a_schema = Schema.object(field_schemas={'a': Schema.string()})
        ab_schema = Schema.object(field_schemas={'b': Schema.string()}).merge(a_schema)
        assert ab_schema.validate({'a': 'x', 'b': 'y', 'c': 'z'}) == (True, {'a': 'x', 'b': 'y'})
        assert set(a_schema.field_schemas) == {'a'}

    def test_merge_incoming_schema_wins(self):
        """Test the merged-in schema replaces a field with the same name."""
        receiver = Schema.object(field_schemas={'v': Schema.string()})
        incoming = Schema.object(field_schemas={'v': Schema.number()})
        receiver.merge(incoming)
        assert receiver.field_schemas['v'] is incoming.field_schemas['v']
        assert receiver.validate({'v': 1}) == (True, {'v': 1})
        assert receiver.validate({'v': 'x'}) == (False, ABSENT)

    def test_merge_rejects_non_object_schema(self):
        """Test merging something else raises."""
        with pytest.raises(ConfigurationError):
            Schema.object().merge(Schema.string())

    def test_shared_child_schema(self):
        """Test one child instance may serve several fields."""
        text = Schema.string()
        schema = Schema.object(field_schemas={'a': text, 'b': text})
        assert schema.validate({'a': 'x', 'b': 'y'}) == (True, {'a': 'x', 'b': 'y'})

    def test_revalidation_is_stable(self):
        """Test validating the output again yields the same value."""
        schema = make_user_schema()
        _, first = schema.validate({'name': 'ann', 'age': 3, 'junk': 1})
        assert schema.validate(first) == (True, first)

    def test_validation_does_not_mutate_input(self):
        """Test the input mapping is left untouched."""
        value = {'name': 'ann', 'age': 3, 'junk': 1}
        make_user_schema().validate(value)
        assert value == {'name': 'ann', 'age': 3, 'junk': 1}


class TestObjectArraySchema:
    """Tests for ObjectArraySchema."""

    def test_validates_every_element(self):
        """Test each element is sanitized by the item schema."""
        schema = Schema.object_array(schema=Schema.object(field_schemas={'id': Schema.number()}))
        value = [{'id': 1, 'x': 0}, {'id': 2}]
        assert schema.validate(value) == (True, [{'id': 1}, {'id': 2}])

    def test_first_failure_rejects_whole_array(self):
        """Test one bad element rejects even if later ones pass."""
        schema = Schema.object_array().set_schema(
            Schema.object(field_schemas={'id': Schema.number()})
        )
        assert schema.validate([{'id': 1}, {'id': -1}, {'id': 2}]) == (False, ABSENT)
        assert schema.validate([{'id': 1}, 'x']) == (False, ABSENT)

    def test_absent_element_rejects(self):
        """Test an element accepted as ABSENT counts as a failure."""
        schema = Schema.object_array(schema=Schema.object(required=False))
        assert schema.validate([{}, None]) == (False, ABSENT)

    def test_without_item_schema(self):
        """Test no item schema rejects any element."""
        schema = Schema.object_array()
        assert schema.validate([]) == (True, [])
        assert schema.validate([{}]) == (False, ABSENT)

    def test_nil_and_non_array_input(self):
        """Test None becomes an empty array, non-arrays are rejected."""
        schema = Schema.object_array(schema=Schema.object())
        assert schema.validate(None) == (True, [])
        assert schema.validate({'id': 1}) == (False, ABSENT)

    def test_custom_predicate_passes_array_through(self):
        """Test a custom predicate returns a shallow copy of the input."""
        schema = Schema.object_array(schema=Schema.object(field_schemas={'id': Schema.number()}))
        schema.set_validate(lambda value: len(value) == 2)
        value = [{'x': 1}, 'not an object']
        accepted, result = schema.validate(value)
        assert (accepted, result) == (True, value)
        assert result is not value
        assert schema.validate([1]) == (False, ABSENT)

    def test_preserves_order(self):
        """Test output order follows input order."""
        schema = Schema.object_array(schema=Schema.object(field_schemas={'i': Schema.number()}))
        value = [{'i': n} for n in (3, 1, 2)]
        assert schema.validate(value) == (True, value)


class TestMixedArraySchema:
    """Tests for MixedArraySchema."""

    def test_first_matching_alternative(self):
        """Test each element takes the first alternative that accepts it."""
        schema = Schema.array().set_schemas([
            Schema.number().set_range([1, 2, 3]),
            Schema.object(field_schemas={'foo': Schema.string()}),
        ])
        assert schema.validate([1, {'foo': 'x', 'bar': 0}, 2]) == (True, [1, {'foo': 'x'}, 2])

    def test_bare_object_alternative_keeps_no_fields(self):
        """Test an object alternative without field schemas yields empty objects."""
        schema = Schema.array(schemas=[Schema.number().set_range([1, 2, 3]), Schema.object()])
        assert schema.validate([1, {'foo': 'x'}, 2]) == (True, [1, {}, 2])

    def test_pass_through_object_alternative(self):
        """Test a custom predicate keeps the whole element."""
        schema = Schema.array(schemas=[
            Schema.number().set_range([1, 2, 3]),
            Schema.object(validate=lambda value: True),
        ])
        assert schema.validate([1, {'foo': 'x'}, 2]) == (True, [1, {'foo': 'x'}, 2])

    def test_order_resolves_overlap(self):
        """Test overlapping alternatives resolve by declaration order."""
        narrow = Schema.object(field_schemas={'a': Schema.number()})
        wide = Schema.object(validate=lambda value: True)
        assert Schema.array(schemas=[narrow, wide]).validate([{'a': 1, 'b': 2}]) == (True, [{'a': 1}])
        assert Schema.array(schemas=[wide, narrow]).validate([{'a': 1, 'b': 2}]) == (True, [{'a': 1, 'b': 2}])

    def test_unmatched_element_rejects(self):
        """Test an element no alternative accepts rejects the array."""
        schema = Schema.array(schemas=[Schema.number(), Schema.string()])
        assert schema.validate([1, 'a']) == (True, [1, 'a'])
        assert schema.validate([1, True, 'a']) == (False, ABSENT)

    def test_absent_result_is_not_a_match(self):
        """Test an alternative answering ABSENT does not match."""
        schema = Schema.array(schemas=[Schema.string(required=False), Schema.number(default_value=0)])
        assert schema.validate([None, 'a']) == (True, [0, 'a'])

    def test_without_alternatives(self):
        """Test no alternatives accepts only the empty array."""
        schema = MixedArraySchema()
        assert schema.validate([]) == (True, [])
        assert schema.validate([1]) == (False, ABSENT)

    def test_nested_mixed_arrays(self):
        """Test a mixed array may contain mixed arrays."""
        inner = Schema.array(schemas=[Schema.boolean()])
        outer = Schema.array(schemas=[Schema.number(), inner])
        assert outer.validate([1, [True, False], 2]) == (True, [1, [True, False], 2])
        assert outer.validate([1, [True, 'x']]) == (False, ABSENT)

    def test_rejects_non_arrays(self):
        """Test the input must be an array."""
        schema = Schema.array(schemas=[Schema.number()])
        assert schema.validate(1) == (False, ABSENT)
        assert schema.validate(None) == (True, [])


class TestCheckConfig:
    """Tests for check_config()."""

    def test_consistent_schema_passes(self):
        """Test a consistent tree returns itself."""
        schema = make_user_schema()
        assert schema.check_config() is schema

    @pytest.mark.parametrize('schema', [
        Schema.number(min=5, max=1),
        Schema.number_array(range=[]),
        Schema.string(range=[]),
        Schema.object(field_schemas={'a': 'not a schema'}),
        Schema.object(field_schemas={'a': Schema.object(field_schemas={'b': Schema.number(min=2, max=1)})}),
        Schema.object_array(schema=Schema.string()),
        Schema.array(),
        Schema.array(schemas=[Schema.string(range=[])]),
    ])
    def test_inconsistent_schema_raises(self, schema):
        """Test misconfiguration is reported on request."""
        with pytest.raises(ConfigurationError) as excinfo:
            schema.check_config()
        assert excinfo.value.details['problems']

    def test_range_makes_bounds_irrelevant(self):
        """Test inverted bounds are fine when a range is set."""
        Schema.number(min=5, max=1, range=[3]).check_config()

    def test_misconfigured_schema_still_validates(self):
        """Test check_config is never implied by validate."""
        assert Schema.string(range=[]).validate('a') == (False, ABSENT)


class TestConcurrency:
    """Tests for concurrent validation of one schema tree."""

    def test_parallel_validation(self):
        """Test threads share a schema without interfering."""
        schema = make_user_schema()
        good = {'name': 'ann', 'age': 3}
        bad = {'name': 'bob', 'age': -3}

        def run(n):
            value = good if n % 2 else bad
            return schema.validate(value).accepted == bool(n % 2)

        with ThreadPoolExecutor(max_workers=8) as executor:
            assert all(executor.map(run, range(200)))
