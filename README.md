# tdswire

`tdswire` reads and writes the binary messages of the Tabular Data Stream
(TDS) protocol, the protocol Microsoft SQL Server speaks on the wire. It uses
only the Python standard library.

It turns Python values into the bytes a server expects, and turns the bytes a
server sends back into Python values. You provide the transport.

## Installation

```
pip install tdswire
```

To run the test suite from a checkout:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `tdswire.reader` | `ByteReader` (little- and big-endian integers, floats, `read_b_varchar`, `read_us_varchar`), `ProtocolError`, `EncodingError` |
| `tdswire.header` | `PacketHeader`, `PacketType`, `PacketStatus`: the 8-byte packet header |
| `tdswire.packet` | `Packet` and `PacketCodec`, which cut a byte buffer into whole packets and write them back |
| `tdswire.pre_login` | `PreloginMessage` and `EncryptionLevel` |
| `tdswire.login` | `LoginMessage`, `FeatureLevel`, `OptionFlag1`, `OptionFlag2`, `OptionFlag3`, `LoginTypeFlag` |
| `tdswire.batch_request` | `BatchRequest`: a SQL batch sent as UTF-16 text behind a transaction header |
| `tdswire.rpc_request` | `TokenRpcRequest`, `RpcParam`, `RpcProcId`, `RpcStatus`, `RpcOption` |
| `tdswire.column_data` | `ColumnData` and `ColumnKind`: typed values, their SQL type name and their parameter encoding |
| `tdswire.column_decode` | `decode_column`: read one value according to its type information |
| `tdswire.type_info` | `FixedLenType`, `VarLenType`, `XmlSchema`, the type descriptions `FixedLen`, `VarLenSized`, `VarLenSizedPrecision`, `XmlType`, and `decode_type_info` |
| `tdswire.plp` | `ReadTyMode`, `decode_plp`, `decode_variable_string` for sized and partially length-prefixed data |
| `tdswire.numeric` | `Numeric`, the decimal/numeric type with a scale of at most 37 |
| `tdswire.temporal` | `DateTime`, `SmallDateTime`, `Date`, `Time`, `DateTime2`, `DateTimeOffset` |
| `tdswire.collation` | `Collation`, `lcid_to_encoding`, `sortid_to_encoding` |
| `tdswire.guid` | `reorder_bytes`: swap between GUID and UUID byte order |
| `tdswire.token_col_metadata` | `TokenColMetaData`, `MetaDataColumn`, `BaseMetaDataColumn`, `ColumnFlag` |
| `tdswire.token_row` | `TokenRow` with `decode` and `decode_nbc` (null-bitmap rows) |
| `tdswire.token_done` | `TokenDone` and `DoneStatus` |
| `tdswire.token_order` | `TokenOrder` |
| `tdswire.token_login_ack` | `TokenLoginAck` |
| `tdswire.token_sspi` | `TokenSSPI` |
| `tdswire.token_type` | `TokenType`, with `TokenType.from_byte` |

## Examples

Decimal values go through `Numeric`:

```python
from decimal import Decimal
from tdswire.numeric import Numeric

n = Numeric.from_decimal(Decimal("577.05"))
n.int_part()    # 577
n.dec_part()    # 5
n.precision()   # 5
n.to_decimal()  # Decimal('577.05')
n.encode()      # length byte, sign byte, little-endian magnitude
```

`varchar` data on older servers is stored in a code page chosen by the
collation. The lookup functions return a Python codec name, or `None` when
the locale or sort id is not supported:

```python
from tdswire.collation import Collation, lcid_to_encoding, sortid_to_encoding

lcid_to_encoding(0x0409)        # 'cp1252'
sortid_to_encoding(52)          # 'cp1252'
Collation(0x0411, 0).encoding() # 'cp932'
```

Incoming bytes are split into packets by `PacketCodec`. `decode` removes one
whole packet from the buffer and returns it, or returns `None` until one has
arrived; `decode_eof` raises `ProtocolError` if bytes are left over at the end
of the stream:

```python
from tdswire.packet import PacketCodec

codec = PacketCodec()
buffer = bytearray()
buffer += received_bytes
packet = codec.decode(buffer)
if packet is not None and packet.is_last():
    ...
```

A result set is read from the payload with a `ByteReader`: after the token
type byte, `TokenColMetaData.decode(reader)` gives the columns,
`TokenRow.decode(reader, metadata)` (or `TokenRow.decode_nbc`) each row, and
`TokenDone.decode(reader, version)` the completion, whose row count is four or
eight bytes wide depending on the `FeatureLevel`.

Requests are built and encoded to bytes:

```python
from tdswire.batch_request import BatchRequest
from tdswire.column_data import ColumnData, ColumnKind
from tdswire.rpc_request import RpcParam, RpcProcId, TokenRpcRequest

BatchRequest("SELECT 1").encode()
TokenRpcRequest(
    RpcProcId.SpExecuteSQL,
    (RpcParam("", ColumnData(ColumnKind.STRING, "SELECT @P1")),),
).encode()
```

## What it does not do

- It opens no connections, negotiates no TLS and performs no authentication;
  `LoginMessage` only carries an SSPI blob handed to it.
- It keeps no connection state: the packet id, packet size, transaction
  descriptor and last column metadata are for the caller to track and pass in.
- `TokenType` knows the codes of every token, but there are no decoders for
  the ERROR, INFO, ENVCHANGE, RETURNSTATUS, RETURNVALUE and COLINFO tokens.
- XML values are decoded, but `ColumnData.encode` raises `ValueError` for
  them.

## Errors

Malformed input raises `ProtocolError`. Text that cannot be decoded with its
codec raises `EncodingError`. Both live in `tdswire.reader`. Values out of
range for their wire form raise `ValueError`.