import pytest

from eth_fullabi.human import (
    CONSTRUCTOR_SIGNATURE_REGEX,
    ERROR_SIGNATURE_REGEX,
    EVENT_MODIFIERS,
    EVENT_SIGNATURE_REGEX,
    FUNCTION_MODIFIERS,
    FUNCTION_SIGNATURE_REGEX,
    TUPLE_SIGNATURE_REGEX,
    is_solidity_type,
    parse_abi_parameter,
    parse_constructor_signature,
    parse_error_signature,
    parse_event_signature,
    parse_function_signature,
    parse_tuple_signature,
    split_parameters,
)


class TestSplitParameters:
    """test parameter splitting functionality."""

    @pytest.mark.parametrize(
        "input_str, expected",
        [
            ("address,uint256", ["address", "uint256"]),
            ("address , uint256 , bool", ["address", "uint256", "bool"]),
            ("(uint256,address),bool", ["(uint256,address)", "bool"]),
            ("((uint256),address),bool", ["((uint256),address)", "bool"]),
            ("", []),
            (" ", []),
            # empty entries are kept, callers decide what to do with them
            ("uint256,,bool", ["uint256", "", "bool"]),
            (
                "(uint256,address),bool,(string,bytes)",
                ["(uint256,address)", "bool", "(string,bytes)"],
            ),
            (
                "((uint256,(address,bool)),string)",
                ["((uint256,(address,bool)),string)"],
            ),
        ],
    )
    def test_valid_parameter_splitting(self, input_str, expected):
        assert split_parameters(input_str) == expected

    @pytest.mark.parametrize(
        "input_str",
        [
            "(uint256,address",
            "uint256,address)",
            "((uint256,address)",
            "(uint256,address))",
            "uint256),(address",
        ],
    )
    def test_invalid_parameter_splitting(self, input_str):
        with pytest.raises(ValueError, match="Invalid parenthesis"):
            split_parameters(input_str)

    def test_long_parameter_list(self):
        params = ",".join(["uint256"] * 2000)
        assert len(split_parameters(params)) == 2000


class TestParseABIParameter:
    """Test ABI parameter parsing."""

    @pytest.mark.parametrize(
        "input_str, expected",
        [
            ("address", {"type": "address"}),
            ("bool", {"type": "bool"}),
            ("address to", {"type": "address", "name": "to"}),
            ("uint256[]", {"type": "uint256[]"}),
            ("address[10]", {"type": "address[10]"}),
            ("bool[][]", {"type": "bool[][]"}),
            # canonical integers
            ("uint", {"type": "uint256"}),
            ("int", {"type": "int256"}),
            ("uint[] amounts", {"type": "uint256[]", "name": "amounts"}),
            ("address payable", {"type": "address"}),
            ("address payable owner", {"type": "address", "name": "owner"}),
            ("ufixed128x18 price", {"type": "ufixed128x18", "name": "price"}),
            ("fixed", {"type": "fixed128x18"}),
            ("ufixed[] prices", {"type": "ufixed128x18[]", "name": "prices"}),
            ("bytes32 hash", {"type": "bytes32", "name": "hash"}),
            ("address[][5] lists", {"type": "address[][5]", "name": "lists"}),
            (
                "(uint256,address)",
                {
                    "type": "tuple",
                    "components": [{"type": "uint256"}, {"type": "address"}],
                },
            ),
            (
                "tuple(uint256 a, address b) pair",
                {
                    "type": "tuple",
                    "name": "pair",
                    "components": [
                        {"type": "uint256", "name": "a"},
                        {"type": "address", "name": "b"},
                    ],
                },
            ),
            (
                "((uint256,address),bool)[] complexPairs",
                {
                    "type": "tuple[]",
                    "name": "complexPairs",
                    "components": [
                        {
                            "type": "tuple",
                            "components": [{"type": "uint256"}, {"type": "address"}],
                        },
                        {"type": "bool"},
                    ],
                },
            ),
            (
                "(uint256,address)[10] fixedPairs",
                {
                    "type": "tuple[10]",
                    "name": "fixedPairs",
                    "components": [{"type": "uint256"}, {"type": "address"}],
                },
            ),
        ],
    )
    def test_basic_parameter_parsing(self, input_str, expected):
        assert parse_abi_parameter(input_str) == expected

    @pytest.mark.parametrize(
        "input_str, modifiers, expected",
        [
            (
                "uint256 calldata value",
                FUNCTION_MODIFIERS,
                {"type": "uint256", "name": "value"},
            ),
            (
                "string memory data",
                FUNCTION_MODIFIERS,
                {"type": "string", "name": "data"},
            ),
            (
                "address indexed from",
                EVENT_MODIFIERS,
                {"type": "address", "name": "from", "indexed": True},
            ),
        ],
    )
    def test_parameter_with_modifiers(self, input_str, modifiers, expected):
        assert parse_abi_parameter(input_str, modifiers) == expected

    @pytest.mark.parametrize(
        "input_str, modifiers, abi_type, expected_error",
        [
            (
                "uint256 indexed value",
                FUNCTION_MODIFIERS,
                "function",
                "Invalid modifier 'indexed' for type function",
            ),
            (
                "string memory data",
                EVENT_MODIFIERS,
                "event",
                "Invalid modifier 'memory' for type event",
            ),
        ],
    )
    def test_invalid_modifiers(self, input_str, modifiers, abi_type, expected_error):
        with pytest.raises(ValueError, match=expected_error):
            parse_abi_parameter(input_str, modifiers, abi_type=abi_type)

    @pytest.mark.parametrize(
        "input_str, expected_error",
        [
            ("invalid parameter structure with spaces", "Invalid parameter"),
            ("(uint256,address", "Invalid parameter"),
            ("()", "Invalid parameter"),
            ("uint256[", "Invalid parameter"),
            ("indexed address from", "Invalid parameter"),
            ("((uint256,address)", "Invalid parenthesis"),
            ("uint7", "Unknown type"),
            ("Foo bar", "Unknown type"),
            ("(uint256,foo)", "Unknown type"),
            ("(uint256 indexed a, address b) pair", "Invalid modifier"),
            ("tuple(string memory s) t", "Invalid modifier"),
        ],
    )
    def test_invalid_parameter_parsing(self, input_str, expected_error):
        with pytest.raises(ValueError, match=expected_error):
            parse_abi_parameter(input_str)


class TestParseFunctionSignature:
    @pytest.mark.parametrize(
        "signature, expected",
        [
            (
                "function transfer(address,uint256)",
                {
                    "type": "function",
                    "name": "transfer",
                    "stateMutability": "nonpayable",
                    "inputs": [{"type": "address"}, {"type": "uint256"}],
                    "outputs": [],
                },
            ),
            (
                "function balanceOf(address) view returns (uint256)",
                {
                    "type": "function",
                    "name": "balanceOf",
                    "stateMutability": "view",
                    "inputs": [{"type": "address"}],
                    "outputs": [{"type": "uint256"}],
                },
            ),
            (
                "function getValues() returns (uint256,bool)",
                {
                    "type": "function",
                    "name": "getValues",
                    "stateMutability": "nonpayable",
                    "inputs": [],
                    "outputs": [{"type": "uint256"}, {"type": "bool"}],
                },
            ),
            (
                "function transfer(address to, uint amount) external",
                {
                    "type": "function",
                    "name": "transfer",
                    "stateMutability": "nonpayable",
                    "inputs": [
                        {"type": "address", "name": "to"},
                        {"type": "uint256", "name": "amount"},
                    ],
                    "outputs": [],
                },
            ),
            (
                "function deposit() external payable",
                {
                    "type": "function",
                    "name": "deposit",
                    "stateMutability": "payable",
                    "inputs": [],
                    "outputs": [],
                },
            ),
        ],
    )
    def test_valid_function_signatures(self, signature, expected):
        assert parse_function_signature(signature) == expected

    @pytest.mark.parametrize(
        "signature, expected_error",
        [
            ("invalid signature", "Invalid function signature"),
            ("function test() invalid returns (uint256)", "Invalid parenthesis"),
            ("function foo(uint256 indexed a)", "Invalid modifier"),
        ],
    )
    def test_invalid_function_signatures(self, signature, expected_error):
        with pytest.raises(ValueError, match=expected_error):
            parse_function_signature(signature)


class TestParseEventSignature:
    @pytest.mark.parametrize(
        "signature, expected",
        [
            (
                "event Transfer(address,uint256)",
                {
                    "type": "event",
                    "name": "Transfer",
                    "inputs": [{"type": "address"}, {"type": "uint256"}],
                    "anonymous": False,
                },
            ),
            (
                "event Transfer(address indexed from, address indexed to, "
                "uint256 value)",
                {
                    "type": "event",
                    "name": "Transfer",
                    "inputs": [
                        {"type": "address", "name": "from", "indexed": True},
                        {"type": "address", "name": "to", "indexed": True},
                        {"type": "uint256", "name": "value"},
                    ],
                    "anonymous": False,
                },
            ),
            (
                "event Ping(uint256 indexed id) anonymous",
                {
                    "type": "event",
                    "name": "Ping",
                    "inputs": [{"type": "uint256", "name": "id", "indexed": True}],
                    "anonymous": True,
                },
            ),
        ],
    )
    def test_valid_event_signatures(self, signature, expected):
        assert parse_event_signature(signature) == expected

    @pytest.mark.parametrize(
        "signature, expected_error",
        [
            ("invalid event signature", "Invalid event signature"),
            ("event Transfer(address memory from)", "Invalid modifier"),
        ],
    )
    def test_invalid_event_signatures(self, signature, expected_error):
        with pytest.raises(ValueError, match=expected_error):
            parse_event_signature(signature)


class TestParseErrorSignature:
    @pytest.mark.parametrize(
        "signature, expected",
        [
            (
                "error InsufficientBalance(uint256, uint256)",
                {
                    "type": "error",
                    "name": "InsufficientBalance",
                    "inputs": [{"type": "uint256"}, {"type": "uint256"}],
                },
            ),
            (
                "error InsufficientBalance(uint256 available, uint256 required)",
                {
                    "type": "error",
                    "name": "InsufficientBalance",
                    "inputs": [
                        {"type": "uint256", "name": "available"},
                        {"type": "uint256", "name": "required"},
                    ],
                },
            ),
        ],
    )
    def test_valid_error_signatures(self, signature, expected):
        assert parse_error_signature(signature) == expected

    @pytest.mark.parametrize(
        "signature, expected_error",
        [
            ("invalid error signature", "Invalid error signature"),
            ("error Bad(uint256 indexed code)", "Invalid modifier"),
        ],
    )
    def test_invalid_error_signatures(self, signature, expected_error):
        with pytest.raises(ValueError, match=expected_error):
            parse_error_signature(signature)


class TestParseConstructorSignature:
    @pytest.mark.parametrize(
        "signature, expected",
        [
            (
                "constructor(address owner, uint256 initialSupply)",
                {
                    "type": "constructor",
                    "stateMutability": "nonpayable",
                    "inputs": [
                        {"type": "address", "name": "owner"},
                        {"type": "uint256", "name": "initialSupply"},
                    ],
                },
            ),
            (
                "constructor(address) payable",
                {
                    "type": "constructor",
                    "stateMutability": "payable",
                    "inputs": [{"type": "address"}],
                },
            ),
            (
                "constructor()",
                {"type": "constructor", "stateMutability": "nonpayable", "inputs": []},
            ),
            (
                "constructor(string memory name, string memory symbol, uint8 decimals)",
                {
                    "type": "constructor",
                    "stateMutability": "nonpayable",
                    "inputs": [
                        {"type": "string", "name": "name"},
                        {"type": "string", "name": "symbol"},
                        {"type": "uint8", "name": "decimals"},
                    ],
                },
            ),
        ],
    )
    def test_valid_constructor_signatures(self, signature, expected):
        assert parse_constructor_signature(signature) == expected

    def test_invalid_constructor_signature(self):
        with pytest.raises(ValueError, match="Invalid constructor signature"):
            parse_constructor_signature("constructor(address) view")


class TestParseTupleSignature:
    @pytest.mark.parametrize(
        "signature, expected",
        [
            ("(uint,address)", [{"type": "uint256"}, {"type": "address"}]),
            ("( int , bool[] )", [{"type": "int256"}, {"type": "bool[]"}]),
            ("(uint256,,address,)", [{"type": "uint256"}, {"type": "address"}]),
            (
                "((uint,bool),bytes32)",
                [
                    {
                        "type": "tuple",
                        "components": [{"type": "uint256"}, {"type": "bool"}],
                    },
                    {"type": "bytes32"},
                ],
            ),
        ],
    )
    def test_valid_tuple_signatures(self, signature, expected):
        assert parse_tuple_signature(signature) == expected

    @pytest.mark.parametrize(
        "signature, expected_error",
        [
            ("()", "no types"),
            ("( , )", "no types"),
            ("(uint256 amount)", "Invalid tuple entry"),
            ("(uint256,foo)", "Unknown type"),
            ("(uint256,(bool)", "Invalid parenthesis"),
            ("uint256,address", "Invalid tuple signature"),
        ],
    )
    def test_invalid_tuple_signatures(self, signature, expected_error):
        with pytest.raises(ValueError, match=expected_error):
            parse_tuple_signature(signature)


class TestRegexPatterns:
    @pytest.mark.parametrize(
        "pattern, signature, expected_groups",
        [
            (
                FUNCTION_SIGNATURE_REGEX,
                "function balanceOf(address owner) public view returns (uint256)",
                {
                    "name": "balanceOf",
                    "parameters": "address owner",
                    "scope": "public",
                    "stateMutability": "view",
                    "returns": "uint256",
                },
            ),
            (
                EVENT_SIGNATURE_REGEX,
                "event Transfer(address indexed from)",
                {"name": "Transfer", "parameters": "address indexed from"},
            ),
            (
                ERROR_SIGNATURE_REGEX,
                "error Unauthorized(address caller)",
                {"name": "Unauthorized", "parameters": "address caller"},
            ),
            (
                CONSTRUCTOR_SIGNATURE_REGEX,
                "constructor(uint256 supply) payable",
                {"parameters": "uint256 supply", "stateMutability": "payable"},
            ),
            (
                TUPLE_SIGNATURE_REGEX,
                "(uint256,(address,bool))",
                {"parameters": "uint256,(address,bool)"},
            ),
        ],
    )
    def test_regex_patterns(self, pattern, signature, expected_groups):
        match = pattern.match(signature)
        assert match is not None
        groups = match.groupdict()
        for key, value in expected_groups.items():
            assert groups[key] == value

    @pytest.mark.parametrize(
        "signature",
        [
            "transfer(address,uint256)",
            "approve(address,uint256)",
            "(uint256,address)[]",
        ],
    )
    def test_keywordless_signatures_match_nothing(self, signature):
        for pattern in (
            FUNCTION_SIGNATURE_REGEX,
            EVENT_SIGNATURE_REGEX,
            ERROR_SIGNATURE_REGEX,
            CONSTRUCTOR_SIGNATURE_REGEX,
            TUPLE_SIGNATURE_REGEX,
        ):
            assert pattern.match(signature) is None


class TestIsSolidityType:
    @pytest.mark.parametrize(
        "type_str, expected",
        [
            ("address", True),
            ("bool", True),
            ("string", True),
            ("bytes", True),
            ("bytes1", True),
            ("bytes32", True),
            ("bytes33", False),
            ("uint8", True),
            ("uint256", True),
            ("uint7", False),
            ("int264", False),
            ("fixed128x18", True),
            ("ufixed", True),
            ("uint", False),
            ("MyStruct", False),
        ],
    )
    def test_solidity_type_validation(self, type_str, expected):
        assert is_solidity_type(type_str) == expected
