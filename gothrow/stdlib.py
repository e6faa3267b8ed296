"""Standard-library stubs.

Each entry is Go source declaring the commonly used, error-returning part of
a standard package's API without bodies.  The stubs are indexed with the
same code as user packages, so call results and method sets of standard
types resolve like any other package.
"""

from __future__ import annotations

STDLIB_STUBS: dict[str, str] = {
    "errors": """
package errors

func New(text string) error
func Join(errs ...error) error
func Unwrap(err error) error
func Is(err, target error) bool
func As(err error, target any) bool
""",
    "fmt": """
package fmt

import "io"

func Errorf(format string, a ...any) error
func Print(a ...any) (n int, err error)
func Printf(format string, a ...any) (n int, err error)
func Println(a ...any) (n int, err error)
func Fprint(w io.Writer, a ...any) (n int, err error)
func Fprintf(w io.Writer, format string, a ...any) (n int, err error)
func Fprintln(w io.Writer, a ...any) (n int, err error)
func Sprintf(format string, a ...any) string
func Sprint(a ...any) string
func Sprintln(a ...any) string
func Sscanf(str string, format string, a ...any) (n int, err error)
func Sscan(str string, a ...any) (n int, err error)
func Scanln(a ...any) (n int, err error)
""",
    "io": """
package io

type Reader interface {
	Read(p []byte) (n int, err error)
}

type Writer interface {
	Write(p []byte) (n int, err error)
}

type Closer interface {
	Close() error
}

type ReadCloser interface {
	Reader
	Closer
}

type WriteCloser interface {
	Writer
	Closer
}

type ReadWriter interface {
	Reader
	Writer
}

func ReadAll(r Reader) ([]byte, error)
func Copy(dst Writer, src Reader) (written int64, err error)
func CopyN(dst Writer, src Reader, n int64) (written int64, err error)
func WriteString(w Writer, s string) (n int, err error)
func ReadFull(r Reader, buf []byte) (n int, err error)
""",
    "io/ioutil": """
package ioutil

import (
	"io"
	"io/fs"
)

func ReadAll(r io.Reader) ([]byte, error)
func ReadFile(filename string) ([]byte, error)
func WriteFile(filename string, data []byte, perm fs.FileMode) error
func TempDir(dir, pattern string) (name string, err error)
""",
    "io/fs": """
package fs

type FileMode uint32

type FileInfo interface {
	Name() string
	Size() int64
	IsDir() bool
}

type DirEntry interface {
	Name() string
	IsDir() bool
	Info() (FileInfo, error)
}

type PathError struct {
	Op   string
	Path string
	Err  error
}

func (e *PathError) Error() string
func (e *PathError) Unwrap() error
""",
    "os": """
package os

import "io/fs"

type File struct{}

type FileMode = fs.FileMode
type FileInfo = fs.FileInfo
type DirEntry = fs.DirEntry
type PathError = fs.PathError

var Stdin *File
var Stdout *File
var Stderr *File
var Args []string

func Open(name string) (*File, error)
func Create(name string) (*File, error)
func OpenFile(name string, flag int, perm FileMode) (*File, error)
func ReadFile(name string) ([]byte, error)
func WriteFile(name string, data []byte, perm FileMode) error
func ReadDir(name string) ([]DirEntry, error)
func Remove(name string) error
func RemoveAll(path string) error
func Rename(oldpath, newpath string) error
func Mkdir(name string, perm FileMode) error
func MkdirAll(path string, perm FileMode) error
func MkdirTemp(dir, pattern string) (string, error)
func CreateTemp(dir, pattern string) (*File, error)
func Stat(name string) (FileInfo, error)
func Lstat(name string) (FileInfo, error)
func Getwd() (dir string, err error)
func Chdir(dir string) error
func Hostname() (name string, err error)
func Executable() (string, error)
func UserHomeDir() (string, error)
func Setenv(key, value string) error
func Unsetenv(key string) error
func Getenv(key string) string
func Exit(code int)

func (f *File) Close() error
func (f *File) Read(b []byte) (n int, err error)
func (f *File) Write(b []byte) (n int, err error)
func (f *File) WriteString(s string) (n int, err error)
func (f *File) Sync() error
func (f *File) Stat() (FileInfo, error)
func (f *File) Seek(offset int64, whence int) (ret int64, err error)
func (f *File) Truncate(size int64) error
func (f *File) Name() string
""",
    "os/exec": """
package exec

type Cmd struct{}

type ExitError struct{}

func (e *ExitError) Error() string

func Command(name string, arg ...string) *Cmd
func LookPath(file string) (string, error)

func (c *Cmd) Run() error
func (c *Cmd) Start() error
func (c *Cmd) Wait() error
func (c *Cmd) Output() ([]byte, error)
func (c *Cmd) CombinedOutput() ([]byte, error)
""",
    "bufio": """
package bufio

import "io"

type Reader struct{}
type Writer struct{}
type Scanner struct{}

func NewReader(rd io.Reader) *Reader
func NewWriter(w io.Writer) *Writer
func NewScanner(r io.Reader) *Scanner

func (b *Reader) ReadString(delim byte) (string, error)
func (b *Reader) ReadBytes(delim byte) ([]byte, error)
func (b *Reader) ReadRune() (r rune, size int, err error)
func (b *Reader) ReadByte() (byte, error)
func (b *Reader) Read(p []byte) (n int, err error)

func (b *Writer) Write(p []byte) (nn int, err error)
func (b *Writer) WriteString(s string) (int, error)
func (b *Writer) WriteByte(c byte) error
func (b *Writer) WriteRune(r rune) (size int, err error)
func (b *Writer) Flush() error

func (s *Scanner) Scan() bool
func (s *Scanner) Text() string
func (s *Scanner) Err() error
""",
    "bytes": """
package bytes

type Buffer struct{}

func NewBufferString(s string) *Buffer
func NewBuffer(buf []byte) *Buffer

func (b *Buffer) Write(p []byte) (n int, err error)
func (b *Buffer) WriteString(s string) (n int, err error)
func (b *Buffer) WriteByte(c byte) error
func (b *Buffer) WriteRune(r rune) (n int, err error)
func (b *Buffer) ReadString(delim byte) (line string, err error)
func (b *Buffer) String() string
func (b *Buffer) Bytes() []byte
""",
    "strings": """
package strings

type Builder struct{}
type Reader struct{}

func NewReader(s string) *Reader

func (b *Builder) WriteString(s string) (int, error)
func (b *Builder) WriteByte(c byte) error
func (b *Builder) WriteRune(r rune) (int, error)
func (b *Builder) Write(p []byte) (int, error)
func (b *Builder) String() string

func (r *Reader) Read(b []byte) (n int, err error)
func (r *Reader) ReadString(delim byte) (string, error)
""",
    "strconv": """
package strconv

type NumError struct {
	Func string
	Num  string
	Err  error
}

func (e *NumError) Error() string

func Atoi(s string) (int, error)
func Itoa(i int) string
func ParseInt(s string, base int, bitSize int) (i int64, err error)
func ParseUint(s string, base int, bitSize int) (uint64, error)
func ParseFloat(s string, bitSize int) (float64, error)
func ParseBool(str string) (bool, error)
func Unquote(s string) (string, error)
func Quote(s string) string
""",
    "encoding/json": """
package json

import "io"

type Decoder struct{}
type Encoder struct{}

type SyntaxError struct {
	Offset int64
}

func (e *SyntaxError) Error() string

func Marshal(v any) ([]byte, error)
func MarshalIndent(v any, prefix, indent string) ([]byte, error)
func Unmarshal(data []byte, v any) error
func NewDecoder(r io.Reader) *Decoder
func NewEncoder(w io.Writer) *Encoder

func (dec *Decoder) Decode(v any) error
func (enc *Encoder) Encode(v any) error
""",
    "net/url": """
package url

type URL struct{}

type Error struct {
	Op  string
	URL string
	Err error
}

func (e *Error) Error() string

func Parse(rawURL string) (*URL, error)
func ParseRequestURI(rawURL string) (*URL, error)
func QueryUnescape(s string) (string, error)
func PathUnescape(s string) (string, error)
""",
    "net/http": """
package http

import (
	"io"
)

type Client struct{}
type Request struct{}
type Header map[string][]string

type Response struct {
	StatusCode int
	Body       io.ReadCloser
}

type ResponseWriter interface {
	Header() Header
	Write([]byte) (int, error)
	WriteHeader(statusCode int)
}

type Server struct{}

var DefaultClient *Client

func Get(url string) (resp *Response, err error)
func Post(url, contentType string, body io.Reader) (resp *Response, err error)
func Head(url string) (resp *Response, err error)
func NewRequest(method, url string, body io.Reader) (*Request, error)
func ListenAndServe(addr string, handler any) error

func (c *Client) Do(req *Request) (*Response, error)
func (c *Client) Get(url string) (resp *Response, err error)
func (srv *Server) ListenAndServe() error
func (srv *Server) Close() error
func (r *Request) ParseForm() error
""",
    "path/filepath": """
package filepath

import "io/fs"

type WalkFunc func(path string, info fs.FileInfo, err error) error

func Abs(path string) (string, error)
func Rel(basepath, targpath string) (string, error)
func Glob(pattern string) (matches []string, err error)
func EvalSymlinks(path string) (string, error)
func Walk(root string, fn WalkFunc) error
func WalkDir(root string, fn fs.WalkDirFunc) error
func Join(elem ...string) string
func Base(path string) string
func Dir(path string) string
func Ext(path string) string
""",
    "time": """
package time

type Time struct{}
type Duration int64
type Location struct{}

type ParseError struct {
	Layout  string
	Value   string
	Message string
}

func (e *ParseError) Error() string

func Now() Time
func Parse(layout, value string) (Time, error)
func ParseInLocation(layout, value string, loc *Location) (Time, error)
func ParseDuration(s string) (Duration, error)
func LoadLocation(name string) (*Location, error)

func (t Time) Format(layout string) string
func (t Time) MarshalJSON() ([]byte, error)
func (t *Time) UnmarshalJSON(data []byte) error
""",
    "net": """
package net

type Conn interface {
	Read(b []byte) (n int, err error)
	Write(b []byte) (n int, err error)
	Close() error
}

type Listener interface {
	Accept() (Conn, error)
	Close() error
}

func Dial(network, address string) (Conn, error)
func Listen(network, address string) (Listener, error)
func LookupHost(host string) (addrs []string, err error)
""",
    "database/sql": """
package sql

type DB struct{}
type Rows struct{}
type Row struct{}
type Tx struct{}
type Result interface {
	LastInsertId() (int64, error)
	RowsAffected() (int64, error)
}

func Open(driverName, dataSourceName string) (*DB, error)

func (db *DB) Close() error
func (db *DB) Ping() error
func (db *DB) Exec(query string, args ...any) (Result, error)
func (db *DB) Query(query string, args ...any) (*Rows, error)
func (db *DB) QueryRow(query string, args ...any) *Row
func (db *DB) Begin() (*Tx, error)

func (r *Row) Scan(dest ...any) error
func (rs *Rows) Scan(dest ...any) error
func (rs *Rows) Close() error
func (rs *Rows) Err() error
func (rs *Rows) Next() bool

func (tx *Tx) Commit() error
func (tx *Tx) Rollback() error
""",
}
